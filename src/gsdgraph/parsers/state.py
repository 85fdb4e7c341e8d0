"""StateParser - Current position, status and blockers from STATE.md.

Recognized conventions:
- Position:  Phase: 2 of 6 (Name)   or   Current focus: Phase 2
- Plan:      Plan: 1 of 3
- Status:    Status: <free text>
- Sections:  ### Blockers/Concerns and ### Pending Todos, each running to
             the next "##", "---" or "*" line, or end of document
"""

from __future__ import annotations

import logging
import re

from gsdgraph.fs import FileSystem, PathLike, resolve_fs
from gsdgraph.models import Blocker, StateResult, Status
from gsdgraph.parsers import read_document

logger = logging.getLogger(__name__)

STATE_FILENAME = "STATE.md"

PHASE_OF_PATTERN = re.compile(r"Phase:\s*(\d+)\s*of\s*\d+", re.IGNORECASE)
CURRENT_FOCUS_PATTERN = re.compile(r"Current focus:\s*Phase\s*(\d+)", re.IGNORECASE)
PLAN_OF_PATTERN = re.compile(r"Plan:\s*(\d+)\s*of\s*\d+", re.IGNORECASE)
STATUS_PATTERN = re.compile(r"Status:\s*([^\n]+)", re.IGNORECASE)
BLOCKERS_SECTION_PATTERN = re.compile(
    r"### Blockers/Concerns\s*\n([\s\S]*?)(?=\n##|\n---|\n\*|\Z)", re.IGNORECASE
)
TODOS_SECTION_PATTERN = re.compile(
    r"### Pending Todos\s*\n([\s\S]*?)(?=\n##|\n---|\n\*|\Z)", re.IGNORECASE
)
BULLET_PATTERN = re.compile(r"[-*]\s+([^\n]+)")

# Checked in order; the first keyword group found in the status text wins
STATUS_KEYWORDS: list[tuple[tuple[str, ...], Status]] = [
    (("complete",), Status.COMPLETE),
    (("progress", "executing"), Status.IN_PROGRESS),
    (("blocked",), Status.BLOCKED),
    (("ready",), Status.PENDING),
]

BLOCKING_TODO_KEYWORDS = ("block", "wait", "depend")


def extract_current_phase(text: str) -> int | None:
    match = PHASE_OF_PATTERN.search(text) or CURRENT_FOCUS_PATTERN.search(text)
    return int(match.group(1)) if match else None


def extract_current_plan(text: str) -> int | None:
    match = PLAN_OF_PATTERN.search(text)
    return int(match.group(1)) if match else None


def classify_status(status_text: str) -> Status:
    """Classify free status text; unrecognized text is PENDING."""
    lowered = status_text.lower().strip()
    for keywords, status in STATUS_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return status
    return Status.PENDING


def extract_status(text: str) -> Status:
    match = STATUS_PATTERN.search(text)
    if not match:
        return Status.PENDING
    return classify_status(match.group(1))


def _section_items(pattern: re.Pattern[str], text: str) -> list[str]:
    """Return bullet texts of a section, skipping empty ones and "none"."""
    match = pattern.search(text)
    if not match:
        return []
    items = []
    for bullet in BULLET_PATTERN.finditer(match.group(1)):
        item = bullet.group(1).strip()
        if item and "none" not in item.lower():
            items.append(item)
    return items


def is_blocking_todo(todo: str) -> bool:
    lowered = todo.lower()
    return any(keyword in lowered for keyword in BLOCKING_TODO_KEYWORDS)


def extract_blockers(text: str) -> list[Blocker]:
    """
    Collect blockers from Blockers/Concerns, then blocking Pending Todos.

    Ids are numbered from the running length of the shared list, so a
    promoted todo continues the count of the blockers found before it
    (blocker-1, blocker-2, todo-blocker-3).
    """
    blockers: list[Blocker] = []
    for item in _section_items(BLOCKERS_SECTION_PATTERN, text):
        blockers.append(Blocker(id=f"blocker-{len(blockers) + 1}", description=item))

    for todo in _section_items(TODOS_SECTION_PATTERN, text):
        if is_blocking_todo(todo):
            blockers.append(
                Blocker(id=f"todo-blocker-{len(blockers) + 1}", description=todo, type="todo")
            )
    return blockers


def parse_state(planning_path: PathLike, fs: FileSystem | None = None) -> StateResult:
    """
    Parse STATE.md in a planning directory.

    Args:
        planning_path: Path to the .planning/ directory
        fs: Filesystem to read through (defaults to the local disk)

    Returns:
        StateResult; when STATE.md is missing, status is UNKNOWN and
        error is "STATE.md not found"
    """
    doc = read_document(planning_path, STATE_FILENAME, resolve_fs(fs))
    if doc.text is None:
        return StateResult(
            current_phase=None,
            current_plan=None,
            status=Status.UNKNOWN,
            blockers=[],
            error=doc.error,
        )

    text = doc.text
    result = StateResult(
        current_phase=extract_current_phase(text),
        current_plan=extract_current_plan(text),
        status=extract_status(text),
        blockers=extract_blockers(text),
    )
    logger.debug(
        "State from %s: phase=%s plan=%s status=%s blockers=%d",
        doc.path,
        result.current_phase,
        result.current_plan,
        result.status.value,
        len(result.blockers),
    )
    return result
