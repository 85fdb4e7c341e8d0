"""PipelineParser - Workflow stage of each phase directory.

A GSD phase moves through six stages. The stage of a phase directory
(``.planning/phases/NN-name/``) is inferred from the artifacts it holds:

    CONTEXT.md / RESEARCH.md        discuss
    NN-NN-VERIFICATION.md / -UAT    verify
    NN-NN-SUMMARY.md                execute (complete once every plan has one)
    NN-NN-PLAN.md                   plan
    nothing                         initialize
"""

from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from enum import Enum

from gsdgraph.fs import DirEntry, FileSystem, PathLike, resolve_fs
from gsdgraph.models import Status

logger = logging.getLogger(__name__)

DEFAULT_ARTIFACT_DONE_BYTES = 50

PHASE_LINE_PATTERN = re.compile(r"Phase:\s*(\d+)\s*-\s*([^\n]+)")
PHASE_DIR_PATTERN = re.compile(r"^(\d+)-(.+)$")
PLAN_FILE_PATTERN = re.compile(r"^\d+-\d+-PLAN\.md$")
SUMMARY_FILE_PATTERN = re.compile(r"^\d+-\d+-SUMMARY\.md$")
VERIFY_FILE_PATTERN = re.compile(r"^\d+-\d+-(VERIFICATION|UAT)\.md$")

DISCUSS_ARTIFACTS = ("CONTEXT.md", "RESEARCH.md")


class ArtifactStatus(Enum):
    DONE = "done"
    IN_PROGRESS = "in-progress"
    MISSING = "missing"


@dataclass(frozen=True)
class Stage:
    id: str
    name: str
    artifact_patterns: tuple[str, ...] = ()


GSD_STAGES: tuple[Stage, ...] = (
    Stage("initialize", "Initialize"),
    Stage("discuss", "Discuss", DISCUSS_ARTIFACTS),
    Stage("plan", "Plan", ("*-PLAN.md",)),
    Stage("execute", "Execute", ("*-SUMMARY.md",)),
    Stage("verify", "Verify", ("*-VERIFICATION.md", "*-UAT.md")),
    Stage("complete", "Complete"),
)


@dataclass(frozen=True)
class Artifact:
    name: str
    path: str
    status: ArtifactStatus


@dataclass(frozen=True)
class PipelinePhase:
    number: int
    name: str
    stage: str
    directory: str
    artifacts: list[Artifact] = field(default_factory=list)


@dataclass(frozen=True)
class CurrentPhase:
    number: int | None
    name: str
    stage: str


@dataclass(frozen=True)
class StageSummary:
    id: str
    name: str
    status: Status
    artifacts: list[Artifact] = field(default_factory=list)


@dataclass(frozen=True)
class PipelineState:
    stages: list[StageSummary]
    current_phase: CurrentPhase
    phases: list[PipelinePhase]


def get_artifact_status(
    artifact_path: PathLike,
    fs: FileSystem | None = None,
    done_bytes: int = DEFAULT_ARTIFACT_DONE_BYTES,
) -> ArtifactStatus:
    """Files larger than done_bytes are done, smaller ones in progress."""
    fs = resolve_fs(fs)
    if not fs.exists(artifact_path):
        return ArtifactStatus.MISSING
    if fs.file_size(artifact_path) > done_bytes:
        return ArtifactStatus.DONE
    return ArtifactStatus.IN_PROGRESS


def _list_entries(directory: PathLike, fs: FileSystem) -> list[DirEntry]:
    try:
        return fs.list_dir(directory)
    except OSError as e:
        logger.warning("Cannot list %s: %s", directory, e)
        return []


def _file_names(phase_dir: PathLike, fs: FileSystem) -> list[str]:
    return [entry.name for entry in _list_entries(phase_dir, fs)]


def get_phase_stage(phase_dir: PathLike, fs: FileSystem | None = None) -> str:
    """Return the stage id a phase directory is in."""
    files = _file_names(phase_dir, resolve_fs(fs))

    if any(name in files for name in DISCUSS_ARTIFACTS):
        return "discuss"

    plans = [f for f in files if PLAN_FILE_PATTERN.match(f)]
    summaries = [f for f in files if SUMMARY_FILE_PATTERN.match(f)]

    if any(VERIFY_FILE_PATTERN.match(f) for f in files):
        return "verify"
    if summaries:
        if plans and len(plans) == len(summaries):
            return "complete"
        return "execute"
    if plans:
        return "plan"
    return "initialize"


def _artifact_order(name: str) -> int:
    if name in DISCUSS_ARTIFACTS:
        return DISCUSS_ARTIFACTS.index(name)
    if "PLAN" in name:
        return 2
    if "SUMMARY" in name:
        return 3
    return 4


def collect_artifacts(
    phase_dir: PathLike,
    fs: FileSystem | None = None,
    done_bytes: int = DEFAULT_ARTIFACT_DONE_BYTES,
) -> list[Artifact]:
    """Return the markdown artifacts of a phase: discussion, plans, summaries, rest."""
    fs = resolve_fs(fs)
    artifacts = []
    for name in _file_names(phase_dir, fs):
        if not name.endswith(".md"):
            continue
        path = os.path.join(phase_dir, name)
        artifacts.append(Artifact(name, path, get_artifact_status(path, fs, done_bytes)))
    artifacts.sort(key=lambda a: (_artifact_order(a.name), a.name.lower(), a.name))
    return artifacts


def find_phase_directory(phases_dir: PathLike, number: int, fs: FileSystem) -> str | None:
    """Return the ``NN-*`` directory for a phase number, if any."""
    if not fs.is_dir(phases_dir):
        return None
    prefix = f"{number:02d}-"
    for entry in _list_entries(phases_dir, fs):
        if entry.name.startswith(prefix):
            return os.path.join(phases_dir, entry.name)
    return None


def parse_phase_directories(
    phases_dir: PathLike,
    fs: FileSystem | None = None,
    done_bytes: int = DEFAULT_ARTIFACT_DONE_BYTES,
) -> list[PipelinePhase]:
    """Scan ``phases/NN-name`` directories, sorted by phase number."""
    fs = resolve_fs(fs)
    if not fs.is_dir(phases_dir):
        return []

    phases = []
    for entry in _list_entries(phases_dir, fs):
        if not entry.is_dir:
            continue
        match = PHASE_DIR_PATTERN.match(entry.name)
        if not match:
            continue
        phase_dir = os.path.join(phases_dir, entry.name)
        phases.append(
            PipelinePhase(
                number=int(match.group(1)),
                name=match.group(2),
                stage=get_phase_stage(phase_dir, fs),
                directory=phase_dir,
                artifacts=collect_artifacts(phase_dir, fs, done_bytes),
            )
        )
    phases.sort(key=lambda p: p.number)
    return phases


def parse_current_phase(planning_path: PathLike, fs: FileSystem | None = None) -> CurrentPhase:
    """Read the ``Phase: NN - Name`` line of STATE.md and locate its stage."""
    fs = resolve_fs(fs)
    unknown = CurrentPhase(number=None, name="Unknown", stage="initialize")

    state_path = os.path.join(planning_path, "STATE.md")
    if not fs.exists(state_path):
        return unknown
    try:
        text = fs.read_file(state_path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", state_path, e)
        return unknown

    match = PHASE_LINE_PATTERN.search(text)
    if not match:
        return unknown

    number = int(match.group(1))
    phase_dir = find_phase_directory(os.path.join(planning_path, "phases"), number, fs)
    stage = get_phase_stage(phase_dir, fs) if phase_dir else "plan"
    return CurrentPhase(number=number, name=match.group(2).strip(), stage=stage)


def build_stage_summary(
    phases: list[PipelinePhase], current_phase: CurrentPhase
) -> list[StageSummary]:
    """Stages before the current one are complete, it is in progress, later ones pending."""
    stage_ids = [stage.id for stage in GSD_STAGES]
    current_index = stage_ids.index(current_phase.stage) if current_phase.stage in stage_ids else -1

    summary = []
    for i, stage in enumerate(GSD_STAGES):
        if i < current_index:
            status = Status.COMPLETE
        elif i == current_index:
            status = Status.IN_PROGRESS
        else:
            status = Status.PENDING
        artifacts = [a for phase in phases if phase.stage == stage.id for a in phase.artifacts]
        summary.append(StageSummary(stage.id, stage.name, status, artifacts))
    return summary


def parse_pipeline_state(
    planning_path: PathLike,
    fs: FileSystem | None = None,
    done_bytes: int = DEFAULT_ARTIFACT_DONE_BYTES,
) -> PipelineState:
    """
    Determine the workflow stage of every phase and of the project.

    Args:
        planning_path: Path to the .planning/ directory
        fs: Filesystem to read through (defaults to the local disk)
        done_bytes: Size above which an artifact counts as done

    Returns:
        PipelineState; missing STATE.md or phases/ give an "Unknown"
        current phase and no phases rather than an error
    """
    fs = resolve_fs(fs)
    current = parse_current_phase(planning_path, fs)
    phases = parse_phase_directories(os.path.join(planning_path, "phases"), fs, done_bytes)
    logger.debug(
        "Pipeline: %d phases, current phase %s at stage %s",
        len(phases),
        current.number,
        current.stage,
    )
    return PipelineState(
        stages=build_stage_summary(phases, current),
        current_phase=current,
        phases=phases,
    )
