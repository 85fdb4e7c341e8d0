"""RequirementsParser - Requirements and traceability from REQUIREMENTS.md.

Two independent passes over the same text:
- Requirement lines:  - [x] **GRF-01**: Description
- Traceability rows:  | GRF-01 | Phase 1 | Pending |

A mapping row without a requirement line, or a requirement without a
mapping row, is normal and not reported.
"""

from __future__ import annotations

import logging
import re

from gsdgraph.fs import FileSystem, PathLike, resolve_fs
from gsdgraph.models import Requirement, RequirementsResult, Status
from gsdgraph.parsers import read_document

logger = logging.getLogger(__name__)

REQUIREMENTS_FILENAME = "REQUIREMENTS.md"

REQUIREMENT_PATTERN = re.compile(r"- \[([ x])\] \*\*([A-Z]+-\d+)\*\*:\s*([^\n]+)")
TRACE_ROW_PATTERN = re.compile(r"\|\s*([A-Z]+-\d+)\s*\|\s*Phase\s*(\d+)\s*\|")


def extract_requirements(text: str) -> list[Requirement]:
    """Return one Requirement per checkbox requirement line, in order."""
    requirements = []
    for match in REQUIREMENT_PATTERN.finditer(text):
        code = match.group(2)
        requirements.append(
            Requirement(
                id=f"req-{code.lower()}",
                code=code,
                description=match.group(3).strip(),
                category=code.split("-")[0],
                status=Status.COMPLETE if match.group(1) == "x" else Status.PENDING,
            )
        )
    return requirements


def extract_phase_mapping(text: str) -> dict[str, int]:
    """Map requirement code to phase number from traceability table rows.

    A code listed twice keeps its last row.
    """
    return {m.group(1): int(m.group(2)) for m in TRACE_ROW_PATTERN.finditer(text)}


def parse_requirements(planning_path: PathLike, fs: FileSystem | None = None) -> RequirementsResult:
    """
    Parse REQUIREMENTS.md in a planning directory.

    Args:
        planning_path: Path to the .planning/ directory
        fs: Filesystem to read through (defaults to the local disk)

    Returns:
        RequirementsResult; empty with error "REQUIREMENTS.md not found"
        if the document is missing
    """
    doc = read_document(planning_path, REQUIREMENTS_FILENAME, resolve_fs(fs))
    if doc.text is None:
        return RequirementsResult(requirements=[], phase_mapping={}, error=doc.error)

    requirements = extract_requirements(doc.text)
    phase_mapping = extract_phase_mapping(doc.text)
    logger.debug(
        "Parsed %d requirements, %d phase mappings from %s",
        len(requirements),
        len(phase_mapping),
        doc.path,
    )
    return RequirementsResult(requirements=requirements, phase_mapping=phase_mapping)
