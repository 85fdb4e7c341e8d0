"""Project loader - Run every parser for one project and assemble its graph.

This module is the single entry point front-ends should use to turn a
project directory into graph data, instead of wiring the parsers up
themselves.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from gsdgraph.config import get_config, get_planning_dir, get_source_configs
from gsdgraph.fs import FileSystem, resolve_fs
from gsdgraph.graph.builder import build_graph
from gsdgraph.models import Graph, ProjectData
from gsdgraph.parsers.directory import parse_directories
from gsdgraph.parsers.pipeline import (
    DEFAULT_ARTIFACT_DONE_BYTES,
    PipelineState,
    parse_pipeline_state,
)
from gsdgraph.parsers.requirements import parse_requirements
from gsdgraph.parsers.roadmap import parse_roadmap
from gsdgraph.parsers.state import parse_state

logger = logging.getLogger(__name__)


def parse_project(
    project_path: Path,
    config: dict[str, Any] | None = None,
    fs: FileSystem | None = None,
    include_state: bool = True,
) -> ProjectData:
    """
    Parse all planning documents and source trees of a project.

    Args:
        project_path: Project root directory
        config: Effective configuration (loaded from .gsdgraph.toml if None)
        fs: Filesystem to read through (defaults to the local disk)
        include_state: Parse STATE.md so blockers become part of the graph

    Returns:
        ProjectData with the directory part already flattened

    Raises:
        ConfigError: If config is None and the config file is invalid
    """
    project_path = Path(project_path)
    if config is None:
        config = get_config(start_path=project_path)
    fs = resolve_fs(fs)

    planning_path = get_planning_dir(config, project_path)
    roadmap = parse_roadmap(planning_path, fs)
    requirements = parse_requirements(planning_path, fs)
    state = parse_state(planning_path, fs) if include_state else None
    for name, result in (("roadmap", roadmap), ("requirements", requirements), ("state", state)):
        if result is not None and result.error:
            logger.info("No %s for %s: %s", name, project_path, result.error)

    directory = parse_directories(get_source_configs(config, project_path), project_path, fs)

    return ProjectData(roadmap=roadmap, requirements=requirements, directory=directory, state=state)


def build_project_graph(
    project_path: Path,
    config: dict[str, Any] | None = None,
    fs: FileSystem | None = None,
    include_state: bool = True,
) -> Graph:
    """Parse a project and return its assembled graph."""
    return build_graph(parse_project(project_path, config, fs, include_state))


def load_pipeline_state(
    project_path: Path,
    config: dict[str, Any] | None = None,
    fs: FileSystem | None = None,
) -> PipelineState:
    """Return the workflow pipeline state using the configured artifact threshold."""
    project_path = Path(project_path)
    if config is None:
        config = get_config(start_path=project_path)
    done_bytes = config.get("pipeline", {}).get("artifact_done_bytes", DEFAULT_ARTIFACT_DONE_BYTES)
    return parse_pipeline_state(get_planning_dir(config, project_path), fs, int(done_bytes))
