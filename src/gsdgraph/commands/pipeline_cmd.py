"""
gsdgraph.commands.pipeline_cmd - Show the workflow stage of each phase.
"""

from __future__ import annotations

import argparse
import json

from gsdgraph.commands import load_command_config
from gsdgraph.project import load_pipeline_state
from gsdgraph.serialize import to_dict


def run(args: argparse.Namespace) -> int:
    """Run the pipeline command."""
    config = load_command_config(args)
    state = load_pipeline_state(args.project, config)
    print(json.dumps(to_dict(state), indent=2))
    return 0
