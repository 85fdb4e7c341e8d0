"""
gsdgraph.config.defaults - Built-in configuration values.
"""

from typing import Any

CONFIG_FILENAME = ".gsdgraph.toml"

DEFAULT_SRC_IGNORE_PATTERNS = [
    "node_modules",
    ".git",
    "dist",
    "build",
    "coverage",
    ".next",
    ".cache",
    "__pycache__",
    ".nuxt",
    ".output",
    "out",
]

DEFAULT_CONFIG: dict[str, Any] = {
    "project": {
        "planning_dir": ".planning",
    },
    "directories": {
        "sources": [
            {"path": ".planning", "source_type": "planning", "ignore": []},
            {"path": "src", "source_type": "src", "ignore": list(DEFAULT_SRC_IGNORE_PATTERNS)},
        ],
    },
    "pipeline": {
        # Artifacts larger than this many bytes count as done
        "artifact_done_bytes": 50,
    },
}
