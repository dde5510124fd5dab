"""
ThemeDocument: one extracted theme plus its provenance.

Documents are immutable. A refresh builds a new document and the host swaps
its reference; nothing is ever patched in place.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from .errors import ThemeInvariantError
from .values import ObjectValue, Value


def compute_fingerprint(*sources: bytes | str) -> str:
    """SHA-256 over the given source contents, in order."""
    hasher = hashlib.sha256()
    for source in sources:
        data = source.encode("utf-8") if isinstance(source, str) else source
        hasher.update(len(data).to_bytes(8, "big"))
        hasher.update(data)
    return hasher.hexdigest()


class ThemeDocument(BaseModel):
    """
    The live theme for one configured source.

    Attributes:
        root: Extracted theme object
        source_path: File the theme literal was found in (None for in-memory sources)
        fingerprint: Content hash of every file visited while locating the theme
        imported_paths: Files other than ``source_path`` that were visited
    """

    root: ObjectValue
    source_path: Path | None = None
    fingerprint: str
    imported_paths: tuple[Path, ...] = Field(default_factory=tuple)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def create(
        cls,
        root: Value,
        fingerprint: str,
        source_path: Path | None = None,
        imported_paths: tuple[Path, ...] = (),
    ) -> ThemeDocument:
        """Build a document, failing fast when the root is not an object."""
        if not isinstance(root, ObjectValue):
            raise ThemeInvariantError(
                f"Theme root must be an object, got {root.kind} ({source_path or '<memory>'})"
            )
        return cls(
            root=root,
            source_path=source_path,
            fingerprint=fingerprint,
            imported_paths=imported_paths,
        )

    @property
    def files(self) -> tuple[Path, ...]:
        """Every file the document depends on."""
        if self.source_path is None:
            return self.imported_paths
        return (self.source_path, *self.imported_paths)
