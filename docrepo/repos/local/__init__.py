from .container import LocalContainer, LocalContainerProvider, LocalDatabase

__all__ = [
    "LocalContainer",
    "LocalContainerProvider",
    "LocalDatabase",
]
