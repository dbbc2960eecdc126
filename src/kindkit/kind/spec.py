"""Cluster spec documents: candidate kind config files for `create`.

Whether a document should be used at all is a policy decision (see
``resolve_spec_document``); the marker check is a plain substring test.
"""

import os
import sys
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, TextIO

from ..core.constants import (
    KIND_SPEC_API_MARKER,
    KIND_SPEC_KIND_MARKER,
    POLICY_ALWAYS,
    POLICY_AUTO,
    POLICY_NEVER,
    YAML_SUFFIXES,
)


@dataclass(frozen=True)
class ClusterSpecDocument:
    """Snapshot of a candidate cluster configuration."""
    text: str
    dirty: bool = False
    path: str | None = None

    @classmethod
    def from_path(cls, path: Path) -> "ClusterSpecDocument":
        return cls(text=path.read_text(encoding="utf-8"), dirty=False, path=str(path))

    @classmethod
    def from_stream(cls, stream: TextIO | None = None) -> "ClusterSpecDocument":
        """Read a document from stdin (unsaved: no path, always dirty)."""
        stream = stream or sys.stdin
        return cls(text=stream.read(), dirty=True, path=None)

    @property
    def is_yaml(self) -> bool:
        # Unsaved buffers have no suffix; judge them by content alone
        if self.path is None:
            return True
        return Path(self.path).suffix.lower() in YAML_SUFFIXES


def is_kind_cluster_spec(yaml_text: str) -> bool:
    return KIND_SPEC_KIND_MARKER in yaml_text and KIND_SPEC_API_MARKER in yaml_text


def resolve_spec_document(
    document: ClusterSpecDocument | None,
    policy: str,
    *,
    launched_from_target: bool = False,
) -> ClusterSpecDocument | None:
    """Decide whether ``document`` should drive cluster creation.

    Returns the document to use, or None for interactive creation.
    Launching from a target (a cluster list entry, the wizard) is always
    interactive.
    """
    if launched_from_target or document is None or policy == POLICY_NEVER:
        return None
    if policy == POLICY_ALWAYS:
        return document
    if policy == POLICY_AUTO:
        if document.is_yaml and is_kind_cluster_spec(document.text):
            return document
        return None
    raise ValueError(f"Unknown spec policy: {policy!r}")


@contextmanager
def cluster_spec_file(document: ClusterSpecDocument) -> Iterator[str]:
    """Yield a file path holding the document's text.

    Saved documents are used in place; dirty or unsaved ones are written to
    a temporary .yaml file that is removed afterwards.
    """
    if not document.dirty and document.path:
        yield document.path
        return

    fd, temp_path = tempfile.mkstemp(suffix=".yaml", prefix="kindkit-")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(document.text)
        yield temp_path
    finally:
        os.unlink(temp_path)
