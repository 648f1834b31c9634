"""
Pull Request Data Models

Normalized pull request records consumed by the diff analyzer
"""

from dataclasses import dataclass
from typing import Any, Dict, FrozenSet


COMMIT_CHANGE_ACTIONS: FrozenSet[str] = frozenset({'opened', 'edited', 'synchronize'})


@dataclass(frozen=True)
class ChangedFile:
    """One entry of a pull request's changed-file listing"""
    filename: str
    status: str = 'modified'
    additions: int = 0
    deletions: int = 0

    def __post_init__(self):
        """데이터 검증"""
        if not isinstance(self.filename, str):
            raise ValueError("filename must be a string")
        if self.additions < 0 or self.deletions < 0:
            raise ValueError("Addition and deletion counts must be non-negative")

    @property
    def rooted_path(self) -> str:
        """Filename anchored at the repository root"""
        return self.filename if self.filename.startswith('/') else '/' + self.filename

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "ChangedFile":
        """Build from a GitHub ``pulls/{n}/files`` entry"""
        return cls(
            filename=data['filename'],
            status=data.get('status', 'modified'),
            additions=data.get('additions', 0),
            deletions=data.get('deletions', 0),
        )


@dataclass(frozen=True)
class PullRequestEvent:
    """Pull request webhook event reduced to the fields analysis needs"""
    id: int
    number: int
    action: str
    loggable_repository_name: str
    pull_request_url: str
    base_repository_url: str
    base_ref: str
    statuses_url: str
    head_sha: str

    def __post_init__(self):
        """데이터 검증"""
        if self.number <= 0:
            raise ValueError("PR number must be positive")

    @property
    def is_commit_change(self) -> bool:
        """Whether the action may have changed the set of files in the pull request"""
        return self.action in COMMIT_CHANGE_ACTIONS
