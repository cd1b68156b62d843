"""
File storage for pipeline artifacts.
"""

from emoji_mapper.storage.assignments_store import (
    AssignmentsFile,
    AssignmentsStore,
    UNASSIGNED_MARKER,
)

__all__ = [
    "AssignmentsFile",
    "AssignmentsStore",
    "UNASSIGNED_MARKER",
]
