"""
Theme document cache.

Holds one ``ThemeDocument`` reference per (project, source) key. Publishing
replaces the reference wholesale, so readers holding the previous document
keep a complete, consistent tree.
"""

from __future__ import annotations

import logging
import threading

from ..core.document import ThemeDocument

logger = logging.getLogger(__name__)

CacheKey = tuple[str, str]


class ThemeDocumentCache:
    """Host-owned cache of live theme documents."""

    def __init__(self) -> None:
        self._documents: dict[CacheKey, ThemeDocument] = {}
        self._lock = threading.Lock()

    def get(self, project_id: str, source: str) -> ThemeDocument | None:
        return self._documents.get((project_id, source))

    def publish(self, project_id: str, source: str, document: ThemeDocument) -> bool:
        """
        Make ``document`` the live one for ``(project_id, source)``.

        Returns:
            True if the live document changed, False when the fingerprint is
            unchanged and the existing document was kept
        """
        key = (project_id, source)
        with self._lock:
            current = self._documents.get(key)
            if current is not None and current.fingerprint == document.fingerprint:
                logger.debug("Theme %s unchanged (%s)", source, document.fingerprint[:12])
                return False
            self._documents[key] = document
        return True

    def drop(self, project_id: str, source: str | None = None) -> None:
        """Forget one source, or every source of a project."""
        with self._lock:
            if source is not None:
                self._documents.pop((project_id, source), None)
                return
            for key in [key for key in self._documents if key[0] == project_id]:
                del self._documents[key]

    def sources(self, project_id: str) -> list[str]:
        return [source for pid, source in self._documents if pid == project_id]

    def __len__(self) -> int:
        return len(self._documents)
