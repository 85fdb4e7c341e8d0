"""Planning document and directory parsers.

Each parser is a total function over its input directory: a missing or
unreadable source yields a fully shaped, empty result with an ``error``
string, and text that matches no known markdown convention is skipped.

Exports:
- Document: A loaded document or the reason it could not be loaded
- read_document: Shared document loading used by the markdown parsers
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from gsdgraph.fs import FileSystem, PathLike

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """Outcome of loading one planning document.

    Exactly one of ``text`` and ``error`` is set.
    """

    path: str
    text: str | None = None
    error: str | None = None


def read_document(planning_path: PathLike, filename: str, fs: FileSystem) -> Document:
    """Load ``planning_path/filename`` in one blocking read.

    Args:
        planning_path: Directory holding the planning documents.
        filename: Document name, e.g. "ROADMAP.md".
        fs: Filesystem to read through.

    Returns:
        Document with the text, or with "<filename> not found" /
        "<filename> could not be read: ..." as error.
    """
    path = os.path.join(planning_path, filename)
    if not fs.exists(path):
        return Document(path, error=f"{filename} not found")
    try:
        text = fs.read_file(path)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", path, e)
        return Document(path, error=f"{filename} could not be read: {e}")
    return Document(path, text=text)

