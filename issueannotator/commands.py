"""
The user-facing command and bootstrap around the annotation pipeline.

Wires the injected host capabilities (vault, notifier, settings store) to
the resolver and annotator. Every error is turned into a notice here.
"""

from typing import Any, Callable, Optional

from .annotator import AnnotationResult, annotate
from .errors import NoActiveDocument, NoTokensOrNoChange
from .host import Notifier, SettingsStore, Vault
from .logger import get_logger
from .resolver import IssueResolver
from .settings import Settings

COMMAND_ID = "fetch-youtrack-issues"
COMMAND_NAME = "Fetch YouTrack Issue Details"

SAMPLE_NOTE_PATH = "YouTrack Issues Sample.md"
SAMPLE_ISSUES = [
    "#EP-38",
    "#EP-39",
    "#EP-40",
    "#EP-41",
    "#EP-42",
    "#EP-43",
    "#EP-44",
    "#SP-45",
    "#SP-46",
    "#SP-47",
    "#SP-48",
    "#SP-49",
]


def sample_note_content() -> str:
    issues = "\n".join(SAMPLE_ISSUES)
    return f"""
This is a sample note with YouTrack issues. You can use the "{COMMAND_NAME}" command to fetch the titles for these issues.

{issues}

## How to use
1. Tag any YouTrack issue in your notes using the format #XXX-XXX where XXX is the project key and XXX is the issue number
2. Run the "{COMMAND_NAME}" command
3. The plugin will fetch and display the issue titles below each issue ID
"""


ResolverFactory = Callable[[Settings, Notifier], Callable]


class IssueAnnotatorApp:
    """Host-facing entry point: settings, bootstrap and the fetch command."""

    def __init__(
        self,
        vault: Vault,
        notifier: Notifier,
        settings_store: SettingsStore,
        resolver_factory: Optional[ResolverFactory] = None,
    ):
        self.vault = vault
        self.notifier = notifier
        self.settings_store = settings_store
        self.resolver_factory = resolver_factory or IssueResolver
        self.settings = Settings()

    def load_settings(self) -> Settings:
        """Load persisted settings; env vars fill an empty token or host."""
        self.settings = Settings.from_data(self.settings_store.load_data()).with_env_overrides()
        return self.settings

    def save_settings(self) -> None:
        self.settings_store.save_data(self.settings.to_data())

    def update_settings(self, **changes: Any) -> Settings:
        """Apply changes to the persisted settings and save them."""
        stored = Settings.from_data(self.settings_store.load_data())
        stored = stored.updated(**changes)
        self.settings_store.save_data(stored.to_data())
        self.settings = stored.with_env_overrides()
        return stored

    def on_load(self, create_sample: bool = True) -> None:
        get_logger().info("Loading issue annotator")
        self.load_settings()
        if create_sample:
            self.create_sample_note()

    def create_sample_note(self) -> bool:
        """Create the sample note once. Returns True if it was created."""
        try:
            if self.vault.get_abstract_file_by_path(SAMPLE_NOTE_PATH) is not None:
                return False
            self.vault.create(SAMPLE_NOTE_PATH, sample_note_content())
        except OSError as e:
            get_logger().error("Could not create sample note", path=SAMPLE_NOTE_PATH, error=str(e))
            self.notifier.notify(str(e), self.settings.error_notice_duration_ms)
            return False
        self.notifier.notify("Sample YouTrack issues note created!", self.settings.notice_duration_ms)
        return True

    def _annotate_active_file(self) -> AnnotationResult:
        file = self.vault.get_active_file()
        if file is None:
            raise NoActiveDocument("No active file found.")

        text = self.vault.read(file)
        resolver = self.resolver_factory(self.settings, self.notifier)
        result = annotate(text, resolver, self.notifier, self.settings.notice_duration_ms)
        get_logger().record_annotations(result.inserted)
        if not result.changed:
            raise NoTokensOrNoChange("No YouTrack issues found to process.")

        self.vault.modify(file, result.new_text)
        get_logger().info("Annotated note", file=str(file), inserted=result.inserted, tokens=len(result.tokens))
        return result

    def fetch_issue_details(self) -> Optional[AnnotationResult]:
        """Annotate the active note; returns the result when the note was written."""
        logger = get_logger()
        try:
            result = self._annotate_active_file()
        except NoActiveDocument as e:
            logger.warning(str(e))
            self.notifier.notify(str(e), self.settings.notice_duration_ms)
            return None
        except NoTokensOrNoChange as e:
            logger.info(str(e))
            self.notifier.notify(str(e), self.settings.notice_duration_ms)
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Could not read or write note", error=str(e))
            self.notifier.notify(str(e), self.settings.error_notice_duration_ms)
            return None
        finally:
            logger.log_metrics_summary()

        self.notifier.notify("YouTrack issue details fetched and appended.", self.settings.notice_duration_ms)
        return result
