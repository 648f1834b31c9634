"""
Settings Document Models

Schema of the repository analysis configuration file
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator


class PatternConditionsDocument(BaseModel):
    """include/exclude glob lists for one file category"""
    model_config = ConfigDict(extra='forbid', frozen=True)

    include: Optional[List[str]] = None
    exclude: Optional[List[str]] = None

    @field_validator('include', 'exclude')
    def validate_patterns(cls, v):
        if v is not None and any(not p.strip() for p in v):
            raise ValueError('Patterns must not be blank')
        return v


class AnalysisSettingsDocument(BaseModel):
    """Top-level configuration document (productionFiles / releaseNoteFiles)"""
    model_config = ConfigDict(extra='forbid', frozen=True, populate_by_name=True)

    production_files: Optional[PatternConditionsDocument] = Field(default=None, alias='productionFiles')
    release_note_files: Optional[PatternConditionsDocument] = Field(default=None, alias='releaseNoteFiles')
