"""
gsdgraph.commands.parse_cmd - Print a single parser's result as JSON.

- `gsdgraph roadmap`       ROADMAP.md phases and plans
- `gsdgraph requirements`  REQUIREMENTS.md requirements and phase mapping
- `gsdgraph state`         STATE.md position, status and blockers
- `gsdgraph tree`          Configured source trees merged under one root
"""

from __future__ import annotations

import argparse
import json
import sys

from gsdgraph.commands import load_command_config
from gsdgraph.config import get_planning_dir, get_source_configs
from gsdgraph.parsers.directory import parse_directories
from gsdgraph.parsers.requirements import parse_requirements
from gsdgraph.parsers.roadmap import parse_roadmap
from gsdgraph.parsers.state import parse_state
from gsdgraph.serialize import to_dict

DOCUMENT_COMMANDS = {
    "roadmap": "Parse ROADMAP.md",
    "requirements": "Parse REQUIREMENTS.md",
    "state": "Parse STATE.md",
    "tree": "Parse the configured source directories",
}

_DOCUMENT_PARSERS = {
    "roadmap": parse_roadmap,
    "requirements": parse_requirements,
    "state": parse_state,
}


def run(args: argparse.Namespace) -> int:
    """Run one of the document commands."""
    config = load_command_config(args)

    if args.command == "tree":
        result = parse_directories(get_source_configs(config, args.project), args.project)
        print(json.dumps({"tree": to_dict(result.tree), "files": to_dict(result.files)}, indent=2))
        return 0

    result = _DOCUMENT_PARSERS[args.command](get_planning_dir(config, args.project))
    print(json.dumps(to_dict(result), indent=2))
    if result.error:
        print(f"Warning: {result.error}", file=sys.stderr)
        return 1
    return 0
