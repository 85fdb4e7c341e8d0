"""
gsdgraph.commands - CLI command implementations
"""

from __future__ import annotations

import argparse
from typing import Any

from gsdgraph.config import get_config


def load_command_config(args: argparse.Namespace) -> dict[str, Any]:
    """Effective config for a command: --config if given, else searched from the project."""
    return get_config(getattr(args, "config", None), start_path=args.project)
