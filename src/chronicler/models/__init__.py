"""
Data Models

Chronicler 시스템의 핵심 데이터 모델들
"""

from .pull_request import ChangedFile, PullRequestEvent, COMMIT_CHANGE_ACTIONS
from .events import EventKind, PingEvent, InstallationEvent, UnrecognizedEvent, WebhookEvent
from .settings_document import AnalysisSettingsDocument, PatternConditionsDocument

__all__ = [
    "ChangedFile",
    "PullRequestEvent",
    "COMMIT_CHANGE_ACTIONS",
    "EventKind",
    "PingEvent",
    "InstallationEvent",
    "UnrecognizedEvent",
    "WebhookEvent",
    "AnalysisSettingsDocument",
    "PatternConditionsDocument",
]
