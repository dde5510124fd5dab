"""
Workspace host: file access, import resolution and the document cache.
"""

from .cache import ThemeDocumentCache
from .project import ThemeWorkspace

__all__ = ["ThemeDocumentCache", "ThemeWorkspace"]
