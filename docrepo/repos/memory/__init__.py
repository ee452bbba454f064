"""
In-memory container backend.

Dictionaries hold the data, so nothing outlives the process. Useful for
tests where external dependencies should be avoided.
"""

from .container import MemoryContainer, MemoryContainerProvider

__all__ = [
    "MemoryContainer",
    "MemoryContainerProvider",
]
