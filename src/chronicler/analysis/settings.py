"""
Analysis Settings

Resolves which paths count as production files and which count as release
notes, from a repository configuration file merged over bundled defaults.
"""

import os
import logging
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, Optional

import yaml
from pydantic import ValidationError

from ..exceptions import (
    ConfigurationError,
    ConfigurationFetchFailure,
    InvalidConfigurationError,
    PackagingDefect,
)
from ..github.client import GitHubAPIError
from ..models.settings_document import AnalysisSettingsDocument, PatternConditionsDocument
from .patterns import PatternConditions


logger = logging.getLogger(__name__)

BUNDLED_SETTINGS_FILE = os.path.join(os.path.dirname(__file__), "default_settings.yml")


def _normalize(path: str) -> str:
    return path.strip().lower()


def _validate_document(data: Any) -> Optional[AnalysisSettingsDocument]:
    if data is None:
        return None

    if not isinstance(data, Mapping):
        raise InvalidConfigurationError(
            f"Configuration must be a mapping, got {type(data).__name__}"
        )

    try:
        return AnalysisSettingsDocument.model_validate(dict(data))
    except ValidationError as e:
        raise InvalidConfigurationError(f"Invalid configuration structure: {e}") from e


def _parse_document(contents: str) -> Optional[AnalysisSettingsDocument]:
    try:
        data = yaml.safe_load(contents)
    except yaml.YAMLError as e:
        raise InvalidConfigurationError("Error parsing YAML configuration") from e

    return _validate_document(data)


@lru_cache(maxsize=1)
def _default_document() -> AnalysisSettingsDocument:
    try:
        with open(BUNDLED_SETTINGS_FILE, 'r', encoding='utf-8') as f:
            document = _parse_document(f.read())
    except OSError as e:
        raise PackagingDefect(f"Error loading default analysis settings from {BUNDLED_SETTINGS_FILE}") from e
    except InvalidConfigurationError as e:
        raise PackagingDefect("Error parsing default analysis settings") from e

    if document is None or document.production_files is None or document.release_note_files is None:
        raise PackagingDefect("Default analysis settings must define productionFiles and releaseNoteFiles")

    return document


def _to_conditions(document: PatternConditionsDocument) -> PatternConditions:
    return PatternConditions.from_expressions(document.include, document.exclude)


@dataclass(frozen=True)
class AnalysisSettings:
    """
    Production-file and release-note-file rules for one repository.

    Instances are immutable and hold no per-analysis state, so one instance
    may be shared by concurrent analyses.
    """
    production_files: PatternConditions
    release_note_files: PatternConditions

    def is_production_file(self, path: str) -> bool:
        return self.production_files.matches(_normalize(path))

    def is_release_note_file(self, path: str) -> bool:
        return self.release_note_files.matches(_normalize(path))

    @classmethod
    def _from_document(cls, document: AnalysisSettingsDocument) -> "AnalysisSettings":
        # Each omitted field is replaced wholesale by the default field
        production_files = document.production_files
        if production_files is None:
            production_files = _default_document().production_files

        release_note_files = document.release_note_files
        if release_note_files is None:
            release_note_files = _default_document().release_note_files

        return cls(
            production_files=_to_conditions(production_files),
            release_note_files=_to_conditions(release_note_files),
        )

    @classmethod
    def from_configuration(cls, data: Optional[Mapping[str, Any]]) -> Optional["AnalysisSettings"]:
        """
        Build settings from an already-parsed configuration document.

        Args:
            data: Mapping with optional ``productionFiles`` / ``releaseNoteFiles``

        Returns:
            Settings, or None when the document is empty

        Raises:
            InvalidConfigurationError: If the document is malformed
        """
        document = _validate_document(data)
        if document is None:
            return None

        try:
            return cls._from_document(document)
        except InvalidConfigurationError:
            raise
        except ConfigurationError as e:
            raise InvalidConfigurationError(str(e)) from e

    @classmethod
    def from_yaml(cls, contents: str) -> Optional["AnalysisSettings"]:
        """
        Build settings from YAML configuration text.

        Args:
            contents: YAML document

        Returns:
            Settings, or None when the document has no content

        Raises:
            InvalidConfigurationError: If the document is malformed
        """
        try:
            data = yaml.safe_load(contents)
        except yaml.YAMLError as e:
            raise InvalidConfigurationError("Error parsing YAML configuration") from e

        return cls.from_configuration(data)

    @classmethod
    def for_repository(cls, client, repository_url: str, branch: str, path: str) -> "AnalysisSettings":
        """
        Resolve settings for a repository branch.

        A missing or unreadable configuration file falls back to the default
        settings; a malformed one is an error.

        Args:
            client: GitHubClient authorized for the repository
            repository_url: API URL of the repository
            branch: Branch to read the configuration from
            path: Path of the configuration file in the repository

        Raises:
            InvalidConfigurationError: If the configuration file is malformed
        """
        return resolve_settings(client, repository_url, branch, path).unwrap()


@lru_cache(maxsize=1)
def default_settings() -> AnalysisSettings:
    """
    Built-in settings, loaded once per process.

    Raises:
        PackagingDefect: If the bundled default configuration is malformed
    """
    try:
        return AnalysisSettings._from_document(_default_document())
    except ConfigurationError as e:
        raise PackagingDefect("Invalid pattern in default analysis settings") from e


class ResolutionOutcome(Enum):
    """How repository settings were resolved"""
    LOADED = "loaded"
    FETCH_FAILED = "fetch_failed"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class SettingsResolution:
    """Result of reading a repository's analysis configuration"""
    outcome: ResolutionOutcome
    settings: Optional[AnalysisSettings] = None
    error: Optional[Exception] = None

    def unwrap(self) -> AnalysisSettings:
        """
        Settings to analyze with.

        Raises:
            InvalidConfigurationError: For a malformed configuration
        """
        if self.outcome is ResolutionOutcome.MALFORMED:
            raise self.error
        if self.outcome is ResolutionOutcome.FETCH_FAILED:
            return default_settings()
        return self.settings


def resolve_settings(client, repository_url: str, branch: str, path: str) -> SettingsResolution:
    """
    Fetch and parse a repository configuration file.

    Args:
        client: GitHubClient authorized for the repository
        repository_url: API URL of the repository
        branch: Branch to read the configuration from
        path: Path of the configuration file in the repository

    Returns:
        LOADED with settings, FETCH_FAILED when the file is absent, unreadable
        or empty, MALFORMED with the parse error otherwise
    """
    try:
        contents = client.get_file_contents(repository_url, branch, path)
    except (GitHubAPIError, ValueError) as e:
        logger.warning(f"Unable to read {path} on {branch}, using default settings: {e}")
        return SettingsResolution(ResolutionOutcome.FETCH_FAILED, error=ConfigurationFetchFailure(str(e)))

    if contents is None:
        logger.info(f"No {path} on {branch}, using default settings")
        return SettingsResolution(
            ResolutionOutcome.FETCH_FAILED,
            error=ConfigurationFetchFailure(f"{path} not found"),
        )

    try:
        settings = AnalysisSettings.from_yaml(contents)
    except InvalidConfigurationError as e:
        e.source = path
        logger.warning(f"Malformed analysis configuration {path} on {branch}: {e}")
        return SettingsResolution(ResolutionOutcome.MALFORMED, error=e)

    if settings is None:
        logger.info(f"{path} on {branch} is empty, using default settings")
        return SettingsResolution(
            ResolutionOutcome.FETCH_FAILED,
            error=ConfigurationFetchFailure(f"{path} is empty"),
        )

    return SettingsResolution(ResolutionOutcome.LOADED, settings=settings)
