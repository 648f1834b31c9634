"""
Pull Request Analyzer

Runs one release-note check for a pull request: reports a pending status,
resolves the repository's analysis settings, classifies the changed files,
and reports exactly one terminal status.
"""

import logging
from typing import Callable, Optional

from ..exceptions import ConfigurationError, ProcessingError
from ..github.client import GitHubClient
from ..github.status import StatusHandler
from ..models.pull_request import PullRequestEvent
from .classifier import Verdict, classify_changed_files
from .messages import StatusCategory, status_for
from .settings import AnalysisSettings


logger = logging.getLogger(__name__)

REPOSITORY_SETTINGS_PATH = ".starchart-labs/chronicler.yml"
DEFAULT_STATUS_CONTEXT = "doc/chronicler"
DEFAULT_PAGE_SIZE = 30


class PullRequestAnalyzer:
    """
    Checks that pull requests changing production files also change release notes.

    Holds no per-analysis state; one instance may analyze several pull
    requests concurrently.
    """

    def __init__(
        self,
        client_factory: Callable[[PullRequestEvent], GitHubClient],
        settings_path: str = REPOSITORY_SETTINGS_PATH,
        page_size: int = DEFAULT_PAGE_SIZE,
        status_context: str = DEFAULT_STATUS_CONTEXT
    ):
        """
        Initialize pull request analyzer.

        Args:
            client_factory: Returns a GitHubClient authorized for the event's repository
            settings_path: Repository path of the analysis configuration file
            page_size: Changed files requested per page
            status_context: Commit status context label
        """
        if not 1 <= page_size <= 100:
            raise ValueError("page_size must be between 1 and 100")

        self.client_factory = client_factory
        self.settings_path = settings_path
        self.page_size = page_size
        self.status_context = status_context

    def analyze(self, event: PullRequestEvent) -> Verdict:
        """
        Analyze a pull request and report the result as a commit status.

        Args:
            event: Pull request event to analyze

        Returns:
            Verdict for the pull request

        Raises:
            ConfigurationError: If the repository configuration is malformed
            ProcessingError: For any other failure
        """
        logger.info(f"Processing pull request for {event.loggable_repository_name}")

        status_handler = None

        try:
            client = self.client_factory(event)
            status_handler = StatusHandler(self.status_context, event.statuses_url, client)

            self._report(status_handler, StatusCategory.PENDING)

            settings = AnalysisSettings.for_repository(
                client, event.base_repository_url, event.base_ref, self.settings_path
            )
            logger.info(f"Using analysis settings: {settings}")

            verdict = classify_changed_files(
                settings,
                client.iter_pull_request_files(event.pull_request_url, per_page=self.page_size)
            )

            logger.info(
                f"Analysis results: prod: {verdict.is_modifying_production_files}, "
                f"rel: {verdict.is_modifying_release_notes}"
            )

            self._report(status_handler, status_for(verdict))
            return verdict
        except ConfigurationError:
            self._report_error(status_handler, StatusCategory.ERROR_CONFIGURATION)
            raise
        except Exception as e:
            logger.error(f"Error processing pull request files: {e}", exc_info=True)
            self._report_error(status_handler, StatusCategory.ERROR_PROCESSING)
            raise ProcessingError("Error processing pull request files") from e

    def _report(self, status_handler: StatusHandler, category: StatusCategory) -> None:
        status_handler.send(category.state, category.description)

    def _report_error(self, status_handler: Optional[StatusHandler], category: StatusCategory) -> None:
        # No client means no way to report; the caller still gets the original error
        if status_handler is None:
            return

        try:
            self._report(status_handler, category)
        except Exception as e:
            logger.error(f"Unable to report {category.value} status: {e}")
