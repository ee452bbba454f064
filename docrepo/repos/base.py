"""
Shared behaviour for container implementations.

Every backend keeps (or can list) its values synchronously, so the lazy
query view is implemented once here on top of ``_snapshot()``.
"""

import logging
from typing import Iterator, List, Type, TypeVar

from pydantic import BaseModel

from docrepo.queryable import Queryable
from docrepo.serialization import try_deserialize

M = TypeVar("M", bound=BaseModel)


class ContainerMixin:
    """Mixin providing build_queryable for Container implementations.

    Classes using this mixin must provide:
    - self.logger: logging.Logger instance
    - self.container_name: str
    - self._snapshot(): the current values, in insertion order
    """

    logger: logging.Logger
    container_name: str

    def _snapshot(self) -> List[str]:
        raise NotImplementedError

    def build_queryable(self, model_class: Type[M]) -> Queryable[M]:
        return Queryable(lambda: self._iter_models(model_class))

    def _iter_models(self, model_class: Type[M]) -> Iterator[M]:
        values = self._snapshot()
        self.logger.debug(
            "Evaluating queryable",
            extra={
                "container_name": self.container_name,
                "model_type": model_class.__name__,
                "item_count": len(values),
            },
        )
        for value in values:
            model = try_deserialize(value, model_class)
            if model is not None:
                yield model
