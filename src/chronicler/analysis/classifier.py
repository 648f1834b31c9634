"""
Diff Classifier

Folds a paginated changed-file listing into a two-flag verdict: whether the
pull request modifies production files and whether it modifies release notes.
"""

import logging
from dataclasses import dataclass
from functools import reduce
from typing import Iterable

from ..models.pull_request import ChangedFile
from .settings import AnalysisSettings


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Verdict:
    """Outcome of classifying every relevant file in a pull request."""
    is_modifying_production_files: bool
    is_modifying_release_notes: bool

    @property
    def is_documented(self) -> bool:
        """Production changes require a release note; no production change needs none."""
        return not self.is_modifying_production_files or self.is_modifying_release_notes


@dataclass(frozen=True)
class ClassificationAccumulator:
    """
    Running classification state for one analysis.

    Flags only ever go from False to True. ``combine`` is a flag-wise OR,
    which is associative and commutative, so partial results may be folded
    in any order.
    """
    has_production_change: bool = False
    has_release_note_change: bool = False

    @classmethod
    def for_file(cls, settings: AnalysisSettings, changed_file: ChangedFile) -> "ClassificationAccumulator":
        path = changed_file.rooted_path
        return cls(
            has_production_change=settings.is_production_file(path),
            has_release_note_change=settings.is_release_note_file(path),
        )

    def combine(self, other: "ClassificationAccumulator") -> "ClassificationAccumulator":
        return ClassificationAccumulator(
            has_production_change=self.has_production_change or other.has_production_change,
            has_release_note_change=self.has_release_note_change or other.has_release_note_change,
        )

    __or__ = combine

    @property
    def is_complete(self) -> bool:
        # No further file can change the verdict once both flags are set
        return self.has_production_change and self.has_release_note_change

    def to_verdict(self) -> Verdict:
        return Verdict(
            is_modifying_production_files=self.has_production_change,
            is_modifying_release_notes=self.has_release_note_change,
        )


def combine_all(accumulators: Iterable[ClassificationAccumulator]) -> ClassificationAccumulator:
    """Fold accumulators computed independently (e.g. per page)."""
    return reduce(ClassificationAccumulator.combine, accumulators, ClassificationAccumulator())


def classify_changed_files(
    settings: AnalysisSettings,
    pages: Iterable[Iterable[ChangedFile]]
) -> Verdict:
    """
    Classify a pull request's changed files.

    Pages are consumed lazily and in order. As soon as both a production file
    and a release note have been seen, iteration stops and no further page is
    requested from ``pages``.

    Args:
        settings: Rules to classify paths with
        pages: Lazily fetched pages of changed files

    Returns:
        Verdict for the files seen
    """
    accumulator = ClassificationAccumulator()
    files_seen = 0

    for page_number, page in enumerate(pages, start=1):
        for changed_file in page:
            files_seen += 1
            accumulator = accumulator.combine(ClassificationAccumulator.for_file(settings, changed_file))

            if accumulator.is_complete:
                logger.debug(f"Verdict complete after {files_seen} files on page {page_number}")
                return accumulator.to_verdict()

    logger.debug(f"Classified {files_seen} files")
    return accumulator.to_verdict()
