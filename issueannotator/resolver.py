"""
Remote issue lookup against the YouTrack REST API.

One GET per identifier, no retries. Every failure is folded into a
ResolutionOutcome so an annotation pass is never blocked by a bad lookup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

import requests

from .errors import ConfigurationMissing, RemoteFailure
from .host import Notifier
from .logger import get_logger
from .settings import Settings

NOT_FOUND_TITLE = "~~Not Found~~"
ISSUE_FIELDS = "idReadable,summary"
REQUEST_TIMEOUT = 15

TOKEN_MISSING_MESSAGE = "YouTrack API token not configured. Please set it in the plugin settings."


class ResolutionStatus(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    REMOTE_FAILURE = "remote_failure"
    CONFIGURATION_MISSING = "configuration_missing"


@dataclass(frozen=True)
class ResolutionOutcome:
    identifier: str
    status: ResolutionStatus
    title: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status in (ResolutionStatus.RESOLVED, ResolutionStatus.NOT_FOUND)

    @classmethod
    def resolved(cls, identifier: str, title: str) -> "ResolutionOutcome":
        return cls(identifier, ResolutionStatus.RESOLVED, title)

    @classmethod
    def not_found(cls, identifier: str) -> "ResolutionOutcome":
        return cls(identifier, ResolutionStatus.NOT_FOUND, NOT_FOUND_TITLE)

    @classmethod
    def remote_failure(cls, identifier: str, error: str) -> "ResolutionOutcome":
        return cls(identifier, ResolutionStatus.REMOTE_FAILURE, NOT_FOUND_TITLE, error)

    @classmethod
    def configuration_missing(cls, identifier: str) -> "ResolutionOutcome":
        return cls(identifier, ResolutionStatus.CONFIGURATION_MISSING, None, TOKEN_MISSING_MESSAGE)


def project_key(identifier: str) -> str:
    return identifier.split("-", 1)[0]


def build_issue_url(host: str, identifier: str) -> str:
    return f"https://{host}/api/issues/{identifier}?fields={ISSUE_FIELDS}"


def build_headers(api_token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {api_token}",
        "Accept": "application/json",
        "Content-Type": "application/json",
        "Cache-Control": "no-cache",
    }


def fetch_issue(identifier: str, settings: Settings, timeout: float = REQUEST_TIMEOUT) -> Optional[Dict[str, Any]]:
    """Fetch one issue and return its JSON body.

    Returns None when the tracker answers 404.

    Raises:
        ConfigurationMissing: If no API token is configured (no request is made)
        RemoteFailure: On any other non-2xx status, an undecodable body,
            or a transport error
    """
    if not settings.has_credential:
        raise ConfigurationMissing(TOKEN_MISSING_MESSAGE)

    url = build_issue_url(settings.host, identifier)
    logger = get_logger()
    logger.record_api_call()
    try:
        resp = requests.get(url, headers=build_headers(settings.api_token), timeout=timeout)
    except requests.exceptions.RequestException as e:
        raise RemoteFailure(identifier, f"Request error: {e}") from e

    if resp.status_code == 404:
        return None
    if not 200 <= resp.status_code < 300:
        raise RemoteFailure(identifier, f"HTTP error! status: {resp.status_code}", resp.status_code)

    try:
        data = resp.json()
    except ValueError as e:
        raise RemoteFailure(identifier, f"Invalid JSON body: {e}", resp.status_code) from e
    return data if isinstance(data, dict) else {}


class IssueResolver:
    """Turn issue identifiers into titles, one remote lookup per call."""

    def __init__(self, settings: Settings, notifier: Optional[Notifier] = None, timeout: float = REQUEST_TIMEOUT):
        self.settings = settings
        self.notifier = notifier
        self.timeout = timeout

    def _notify_error(self, message: str) -> None:
        if self.notifier is not None:
            self.notifier.notify(message, self.settings.error_notice_duration_ms)

    def resolve(self, identifier: str) -> ResolutionOutcome:
        logger = get_logger()
        project = project_key(identifier)
        logger.record_lookup_attempt(project)

        try:
            data = fetch_issue(identifier, self.settings, timeout=self.timeout)
        except ConfigurationMissing:
            logger.record_lookup_failure(project, "ConfigurationMissing")
            logger.warning("API token missing, lookup skipped", issue=identifier)
            self._notify_error(TOKEN_MISSING_MESSAGE)
            return ResolutionOutcome.configuration_missing(identifier)
        except RemoteFailure as e:
            error_type = f"HTTPError_{e.status_code}" if e.status_code else "RequestException"
            logger.record_lookup_failure(project, error_type)
            logger.error("Issue lookup failed", issue=identifier, error=str(e))
            self._notify_error(f"Failed to fetch YouTrack issue {identifier}")
            return ResolutionOutcome.remote_failure(identifier, str(e))

        if data is None:
            logger.record_lookup_success(project, found=False)
            logger.info("Issue not found", issue=identifier, status=404)
            return ResolutionOutcome.not_found(identifier)

        summary = data.get("summary")
        if isinstance(summary, str) and summary.strip():
            logger.record_lookup_success(project)
            logger.debug("Issue resolved", issue=identifier, summary=summary)
            return ResolutionOutcome.resolved(identifier, summary)

        logger.record_lookup_success(project, found=False)
        logger.info("Issue has no summary", issue=identifier)
        return ResolutionOutcome.not_found(identifier)

    __call__ = resolve
