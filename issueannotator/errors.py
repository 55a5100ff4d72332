"""
Error taxonomy for the annotation pipeline.

None of these escape a command: the resolver and the command layer catch
them and turn them into user notices.
"""

from typing import Optional


class IssueAnnotatorError(Exception):
    """Base class for pipeline errors."""
    pass


class ConfigurationMissing(IssueAnnotatorError):
    """Raised when the API token is not configured."""
    pass


class RemoteFailure(IssueAnnotatorError):
    """Raised on a non-2xx lookup response or a transport exception."""

    def __init__(self, identifier: str, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.identifier = identifier
        self.status_code = status_code


class NoActiveDocument(IssueAnnotatorError):
    """Raised when a command runs without an active document."""
    pass


class NoTokensOrNoChange(IssueAnnotatorError):
    """Raised when a pass found nothing to insert."""
    pass
