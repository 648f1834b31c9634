"""
Diff Analysis

Path classification rules, the changed-file classifier, and the pull
request analyzer built on them.
"""

from .patterns import PathPattern, PatternConditions
from .settings import AnalysisSettings, SettingsResolution, ResolutionOutcome, default_settings, resolve_settings
from .classifier import ClassificationAccumulator, Verdict, classify_changed_files
from .messages import StatusCategory, status_for
from .analyzer import PullRequestAnalyzer

__all__ = [
    'PathPattern',
    'PatternConditions',
    'AnalysisSettings',
    'SettingsResolution',
    'ResolutionOutcome',
    'default_settings',
    'resolve_settings',
    'ClassificationAccumulator',
    'Verdict',
    'classify_changed_files',
    'StatusCategory',
    'status_for',
    'PullRequestAnalyzer',
]
