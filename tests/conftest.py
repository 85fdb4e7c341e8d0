"""Pytest fixtures shared by the gsdgraph tests."""

from pathlib import Path

import pytest

ROADMAP_MD = """\
# Roadmap: Planning Visualizer

## Phases

- [x] **Phase 1: Foundation** - Electron shell and parsers
- [ ] **Phase 2: Graph Rendering** - Force-directed graph
- [ ] **Phase 2.5: Polish** - Inserted cleanup phase
- [ ] **Phase 3: Live Updates** - File watching

## Phase Details

### Phase 1: Foundation
**Goal**: Parse planning documents into data
**Plans**: 2 plans

Plans:
- [x] 01-01-PLAN.md — Project scaffold
- [x] 01-02-PLAN.md — Markdown parsers

### Phase 2: Graph Rendering
**Goal**: Render the project as a 3D graph
**Plans**: 3 plans

Plans:
- [x] 02-01-PLAN.md — Graph builder
- [ ] 02-02-PLAN.md - Node styling
- [ ] 02-03-PLAN.md

### Phase 3: Live Updates
**Goal**: Refresh when files change

### Phase 2.5: Polish
**Goal**: Tidy up

## Progress

| Phase | Plans Complete | Status |
"""

REQUIREMENTS_MD = """\
# Requirements

## v1 Requirements

### Graph

- [x] **GRF-01**: Show phases as nodes
- [ ] **GRF-02**: Show plans under phases

### Parsing

- [x] **PRS-01**: Parse ROADMAP.md

## Traceability

| Requirement | Phase | Status |
|-------------|-------|--------|
| GRF-01 | Phase 2 | Complete |
| GRF-02 | Phase 2 | Pending |
| PRS-01 | Phase 1 | Complete |
| LIV-01 | Phase 3 | Pending |
"""

STATE_MD = """\
# Project State

## Current Position

Phase: 2 of 4 (Graph Rendering)
Plan: 2 of 3 in current phase
Status: In progress
Last activity: 2026-01-10 - Completed 02-01-PLAN.md

## Accumulated Context

### Pending Todos

- Add unit tests for parsers
- Waiting for design review of node colors

### Blockers/Concerns

- WebGL performance on large trees unknown
- Depends on upstream 3d-force-graph fix

---
"""


@pytest.fixture
def planning_files():
    """Planning documents of a sample project rooted at /proj."""
    return {
        "/proj/.planning/ROADMAP.md": ROADMAP_MD,
        "/proj/.planning/REQUIREMENTS.md": REQUIREMENTS_MD,
        "/proj/.planning/STATE.md": STATE_MD,
        "/proj/.planning/phases/01-foundation/01-01-PLAN.md": "# Plan 01-01\n",
        "/proj/src/main/app.js": "console.log('hi');\n",
        "/proj/src/node_modules/lib/index.js": "",
    }


@pytest.fixture
def memory_fs(planning_files):
    """MemoryFileSystem holding the sample project."""
    from gsdgraph.fs import MemoryFileSystem

    return MemoryFileSystem(planning_files)


@pytest.fixture
def sample_project(tmp_path, planning_files) -> Path:
    """Write the sample project to disk and return its root."""
    root = tmp_path / "proj"
    for name, text in planning_files.items():
        path = root / name[len("/proj/") :]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def write_doc(directory: Path, name: str, text: str) -> Path:
    """Write a planning document into directory and return the directory."""
    directory.mkdir(parents=True, exist_ok=True)
    (directory / name).write_text(text, encoding="utf-8")
    return directory
