"""
JSON conversion between documents and their stored text form.

Pydantic does the actual work (``model_dump_json`` and
``model_validate_json``). These helpers only normalise how failures are
reported so the repository can tell "no output" apart from "bad input".
"""

import logging
from typing import Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticSerializationError

from .exceptions import DeserializationError

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def serialize(model: BaseModel, pretty: bool = False) -> Optional[str]:
    """Serialize a model to JSON.

    Args:
        model: The Pydantic model to serialize
        pretty: Indent the output for human consumption (logging)

    Returns:
        The JSON text, or None if the model could not be serialized
    """
    try:
        text = model.model_dump_json(indent=2 if pretty else None)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        logger.error(
            "Failed to serialize model",
            extra={
                "model_type": type(model).__name__,
                "error": str(e),
                "error_type": type(e).__name__,
            },
        )
        return None

    return text or None


def deserialize(text: str, model_class: Type[M]) -> M:
    """Parse JSON into ``model_class``.

    Raises:
        DeserializationError: If the text is not valid JSON for the model
    """
    try:
        return model_class.model_validate_json(text)
    except ValidationError as e:
        raise DeserializationError(
            f"Failed to deserialize {model_class.__name__}: {e}"
        ) from e


def try_deserialize(text: str, model_class: Type[M]) -> Optional[M]:
    """Like :func:`deserialize` but returns None instead of raising."""
    try:
        return deserialize(text, model_class)
    except DeserializationError as e:
        logger.debug(
            "Skipping item that failed to deserialize",
            extra={"model_type": model_class.__name__, "error": str(e)},
        )
        return None
