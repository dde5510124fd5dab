"""
themelens Language Server Protocol implementation.

Provides IDE features for theme accesses in JavaScript/TypeScript:
- Completion of theme paths and legacy theme alias keys
- Hover with resolved values
- Inlay value hints
- Document colors
"""

from .server import start_server

__all__ = ["start_server"]
