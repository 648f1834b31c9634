"""
Error Taxonomy

Exceptions raised while resolving analysis settings and analyzing pull requests.
"""

from typing import Optional


class ChroniclerError(Exception):
    """Base class for all Chronicler errors"""


class ConfigurationError(ChroniclerError):
    """Invalid path pattern or configuration content supplied by a repository owner"""


class InvalidConfigurationError(ConfigurationError):
    """Repository configuration document is present but structurally malformed"""
    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source


class ConfigurationFetchFailure(ChroniclerError):
    """Repository configuration document is absent or could not be read"""


class ProcessingError(ChroniclerError):
    """Failure while paging, classifying, or reporting a pull request analysis"""


class PackagingDefect(ChroniclerError, RuntimeError):
    """The bundled default analysis settings cannot be loaded"""
