"""
Container backends and the factory that selects one from settings.
"""

from .factory import create_container_provider

__all__ = ["create_container_provider"]
