"""
Scan a note for issue tokens and insert resolved titles beneath them.

Tokens are matched on the raw text, but insertions happen on a line list
that shifts as lines are added. The target line is therefore located again
for every match, scanning from the top: the first line containing the token
whose next line is not already a "Title:" annotation.
"""

import re
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple, Union

from .host import Notifier
from .resolver import ResolutionOutcome
from .settings import DEFAULT_NOTICE_DURATION_MS

ISSUE_PATTERN = re.compile(r"#([A-Z]+-\d+)")
TITLE_MARKER = "Title:"

ResolverResult = Union[ResolutionOutcome, str, None]
ResolverFn = Callable[[str], ResolverResult]


@dataclass
class AnnotationResult:
    new_text: str
    changed: bool
    tokens: List[str] = field(default_factory=list)
    inserted: int = 0


def find_issue_tokens(text: str) -> List[Tuple[str, str]]:
    """Return (raw token, identifier) pairs in the order they appear."""
    return [(m.group(0), m.group(1)) for m in ISSUE_PATTERN.finditer(text)]


def _title_of(result: ResolverResult) -> Optional[str]:
    if result is None or isinstance(result, str):
        return result
    return result.title


def _is_annotated(lines: List[str], idx: int) -> bool:
    return idx + 1 < len(lines) and TITLE_MARKER in lines[idx + 1]


def find_target_line(lines: List[str], token: str) -> int:
    """Index of the line that should receive token's annotation, or -1.

    The first line containing token (plain substring, from the top) wins
    when it is not yet annotated. Otherwise later lines are considered, but
    only where token stands on its own: "#EP-1" must not claim "#EP-12".
    """
    first = next((i for i, line in enumerate(lines) if token in line), -1)
    if first == -1 or not _is_annotated(lines, first):
        return first
    bounded = re.compile(re.escape(token) + r"(?!\d)")
    for i in range(first + 1, len(lines)):
        if bounded.search(lines[i]) and not _is_annotated(lines, i):
            return i
    return -1


def insert_title(lines: List[str], token: str, title: str) -> bool:
    """Insert "Title: ..." beneath the target line for token, in place.

    The new line keeps the carriage return of the line above it, so CRLF
    notes stay CRLF.
    """
    idx = find_target_line(lines, token)
    if idx == -1:
        return False
    eol = "\r" if lines[idx].endswith("\r") else ""
    lines.insert(idx + 1, f"{TITLE_MARKER} {title}{eol}")
    return True


def annotate(
    text: str,
    resolve: ResolverFn,
    notify: Optional[Notifier] = None,
    notice_duration_ms: int = DEFAULT_NOTICE_DURATION_MS,
) -> AnnotationResult:
    """
    Run one annotation pass over a document.

    Args:
        text: Document text
        resolve: Called once per token occurrence with the identifier
            (e.g. "EP-1"); may return a ResolutionOutcome, a title or None
        notify: Optional notifier for per-token progress notices
        notice_duration_ms: Duration passed along with progress notices

    Returns:
        AnnotationResult; new_text is the input text untouched unless
        at least one title line was inserted
    """
    lines = text.split("\n")
    result = AnnotationResult(new_text=text, changed=False)

    for token, identifier in find_issue_tokens(text):
        result.tokens.append(identifier)
        title = _title_of(resolve(identifier))
        if notify is not None:
            details = title if title is not None else "unavailable"
            notify.notify(f"Processing issue: {identifier} Details: {details}", notice_duration_ms)
        if not title:
            continue
        if insert_title(lines, token, title):
            result.inserted += 1

    if result.inserted:
        result.new_text = "\n".join(lines)
        result.changed = True
    return result
