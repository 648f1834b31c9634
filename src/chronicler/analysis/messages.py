"""
Status Messages

Commit status categories reported for an analysis and their descriptions.
"""

from enum import Enum

from .classifier import Verdict


class StatusCategory(Enum):
    """Commit status reported for an analysis run."""
    PENDING = "pending"
    SUCCESS_UPDATED = "success-updated"
    SUCCESS_UNNEEDED = "success-unneeded"
    FAILURE = "failure"
    ERROR_CONFIGURATION = "error-configuration"
    ERROR_PROCESSING = "error-processing"

    @property
    def state(self) -> str:
        """GitHub commit status state"""
        return _STATES[self]

    @property
    def description(self) -> str:
        return MESSAGES[self]


_STATES = {
    StatusCategory.PENDING: "pending",
    StatusCategory.SUCCESS_UPDATED: "success",
    StatusCategory.SUCCESS_UNNEEDED: "success",
    StatusCategory.FAILURE: "failure",
    StatusCategory.ERROR_CONFIGURATION: "error",
    StatusCategory.ERROR_PROCESSING: "error",
}

MESSAGES = {
    StatusCategory.PENDING: "Checking for release note changes",
    StatusCategory.SUCCESS_UPDATED: "Release notes updated",
    StatusCategory.SUCCESS_UNNEEDED: "No production files changed, release notes not required",
    StatusCategory.FAILURE: "Production files changed without release notes",
    StatusCategory.ERROR_CONFIGURATION: "Invalid analysis configuration, check the repository settings file",
    StatusCategory.ERROR_PROCESSING: "Error processing pull request files",
}


def status_for(verdict: Verdict) -> StatusCategory:
    """Terminal status category for a verdict."""
    if not verdict.is_documented:
        return StatusCategory.FAILURE
    if verdict.is_modifying_production_files:
        return StatusCategory.SUCCESS_UPDATED
    return StatusCategory.SUCCESS_UNNEEDED
