"""
Configuration for document repositories and container providers.

Settings are a plain Pydantic model passed explicitly to whatever needs
them. They can be built directly, read from the environment, or loaded
from a YAML file.
"""

import logging
import os
from enum import Enum
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)

_TRUE_VALUES = {"1", "true", "yes", "on"}


class ContainerBackend(str, Enum):
    """Storage engine behind the containers."""

    MEMORY = "memory"
    LOCAL = "local"
    MINIO = "minio"


class RepositorySettings(BaseModel):
    """Settings shared by repositories and container providers."""

    log: bool = Field(
        False,
        description=(
            "Emit DEBUG logs for every operation, including the JSON "
            "payload of single-item writes"
        ),
    )
    backend: ContainerBackend = Field(
        ContainerBackend.LOCAL, description="Container storage engine"
    )
    minio_endpoint: str = Field("localhost:9000")
    minio_access_key: str = Field("minioadmin")
    minio_secret_key: str = Field("minioadmin")
    minio_secure: bool = Field(False)

    @classmethod
    def from_env(cls, **overrides: Any) -> "RepositorySettings":
        """Build settings from environment variables.

        Recognised variables are ``DOCREPO_LOG``, ``DOCREPO_BACKEND``,
        ``MINIO_ENDPOINT``, ``MINIO_ROOT_USER``, ``MINIO_ROOT_PASSWORD`` and
        ``MINIO_SECURE``. Keyword arguments take precedence.
        """
        values: Dict[str, Any] = {
            "log": _env_flag("DOCREPO_LOG"),
            "backend": os.environ.get("DOCREPO_BACKEND", "local").lower(),
            "minio_endpoint": os.environ.get(
                "MINIO_ENDPOINT", "localhost:9000"
            ),
            "minio_access_key": os.environ.get(
                "MINIO_ROOT_USER", "minioadmin"
            ),
            "minio_secret_key": os.environ.get(
                "MINIO_ROOT_PASSWORD", "minioadmin"
            ),
            "minio_secure": _env_flag("MINIO_SECURE"),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        settings = cls(**values)
        logger.debug(
            "Loaded repository settings from environment",
            extra={"log": settings.log, "backend": settings.backend.value},
        )
        return settings

    @classmethod
    def from_yaml(cls, config_path: str) -> "RepositorySettings":
        """Load settings from the ``docrepo`` section of a YAML file.

        Args:
            config_path: Path to the YAML file, supports ~ expansion

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the file does not contain a mapping
        """
        path = Path(config_path).expanduser()
        with open(path, "r") as f:
            config_data = yaml.safe_load(f) or {}

        if not isinstance(config_data, dict):
            raise ValueError(
                f"Configuration file must contain a YAML dictionary: {path}"
            )

        section = config_data.get("docrepo", config_data)
        if not isinstance(section, dict):
            raise ValueError(f"'docrepo' must be a mapping in {path}")

        logger.debug(f"Loaded repository settings from {path}")
        return cls(**section)


def _env_flag(name: str) -> bool:
    return os.environ.get(name, "").strip().lower() in _TRUE_VALUES
