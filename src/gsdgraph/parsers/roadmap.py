"""RoadmapParser - Phases and plans from ROADMAP.md.

Recognized conventions:
- Overview checklist:  - [x] **Phase 1: Foundation** - description
- Phase section:       ### Phase 1: Foundation
- Goal line:           **Goal**: text
- Plan line:           - [ ] 01-02-PLAN.md — description
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator

from gsdgraph.fs import FileSystem, PathLike, resolve_fs
from gsdgraph.models import Phase, Plan, RoadmapResult, Status
from gsdgraph.parsers import read_document

logger = logging.getLogger(__name__)

ROADMAP_FILENAME = "ROADMAP.md"


class RoadmapParser:
    """Extracts Phase records from roadmap text.

    Phase status comes from the overview checklist first; a phase that is
    not checked off but has at least one completed plan is in progress.
    """

    PHASE_STATUS_PATTERN = re.compile(r"- \[([ x])\] \*\*Phase (\d+(?:\.\d+)?): ([^*]+)\*\*")
    # A section runs until the next "### Phase", a level-2 heading, or EOF
    PHASE_SECTION_PATTERN = re.compile(
        r"### Phase (\d+(?:\.\d+)?): ([^\n]+)\n([\s\S]*?)(?=### Phase|\n## |\Z)"
    )
    GOAL_PATTERN = re.compile(r"\*\*Goal\*\*:\s*([^\n]+)")
    PLAN_PATTERN = re.compile(r"- \[([ x])\] (\d+-\d+-PLAN\.md)(?: [—-] (.+))?")
    PLAN_NUMBER_PATTERN = re.compile(r"(\d+-\d+)")

    def extract_phase_statuses(self, text: str) -> dict[str, Status]:
        """Map phase number (as written) to its overview checkbox status."""
        statuses: dict[str, Status] = {}
        for match in self.PHASE_STATUS_PATTERN.finditer(text):
            checked = match.group(1) == "x"
            statuses[match.group(2)] = Status.COMPLETE if checked else Status.PENDING
        return statuses

    def iter_phase_sections(self, text: str) -> Iterator[tuple[str, str, str]]:
        """Yield (number, name, body) for each ``### Phase N: Name`` section."""
        for match in self.PHASE_SECTION_PATTERN.finditer(text):
            yield match.group(1), match.group(2).strip(), match.group(3)

    def extract_goal(self, section: str) -> str:
        match = self.GOAL_PATTERN.search(section)
        return match.group(1).strip() if match else ""

    def extract_plans(self, section: str) -> list[Plan]:
        """Return the plan entries of a phase section in document order."""
        plans = []
        for match in self.PLAN_PATTERN.finditer(section):
            plan_file = match.group(2)
            number = self.PLAN_NUMBER_PATTERN.search(plan_file)
            plan_id = f"plan-{number.group(1)}" if number else f"plan-{plan_file}"
            plans.append(
                Plan(
                    id=plan_id,
                    file=plan_file,
                    name=plan_file,
                    description=(match.group(3) or "").strip(),
                    status=Status.COMPLETE if match.group(1) == "x" else Status.PENDING,
                )
            )
        return plans

    @staticmethod
    def resolve_status(checkbox_status: Status | None, plans: list[Plan]) -> Status:
        """Checkbox status wins; otherwise any completed plan means in progress."""
        status = checkbox_status or Status.PENDING
        if status != Status.COMPLETE and any(p.status == Status.COMPLETE for p in plans):
            status = Status.IN_PROGRESS
        return status

    def parse_text(self, text: str) -> list[Phase]:
        """Parse roadmap text into phases sorted by number."""
        statuses = self.extract_phase_statuses(text)
        phases = []
        for number, name, section in self.iter_phase_sections(text):
            plans = self.extract_plans(section)
            phases.append(
                Phase(
                    id=f"phase-{number}",
                    number=float(number),
                    name=name,
                    goal=self.extract_goal(section),
                    status=self.resolve_status(statuses.get(number), plans),
                    plans=plans,
                )
            )
        phases.sort(key=lambda p: p.number)
        return phases


def parse_roadmap(planning_path: PathLike, fs: FileSystem | None = None) -> RoadmapResult:
    """
    Parse ROADMAP.md in a planning directory.

    Args:
        planning_path: Path to the .planning/ directory
        fs: Filesystem to read through (defaults to the local disk)

    Returns:
        RoadmapResult with phases, or empty phases and an error
        ("ROADMAP.md not found") if the document is missing
    """
    doc = read_document(planning_path, ROADMAP_FILENAME, resolve_fs(fs))
    if doc.text is None:
        return RoadmapResult(phases=[], error=doc.error)

    phases = RoadmapParser().parse_text(doc.text)
    logger.debug(
        "Parsed %d phases, %d plans from %s",
        len(phases),
        sum(len(p.plans) for p in phases),
        doc.path,
    )
    return RoadmapResult(phases=phases)
