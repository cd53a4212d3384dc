# File: helpers/__init__.py
"""Home Assistant-bound helper functions for FitStreak.

Submodules:
    - entity_helpers: Instance-scoped signal names and entity unique ids
    - backup_helpers: Import/export documents and file IO

Usage:
    from .helpers import backup_helpers
    from .helpers.entity_helpers import get_event_signal
"""

from . import backup_helpers, entity_helpers

__all__ = [
    "backup_helpers",
    "entity_helpers",
]
