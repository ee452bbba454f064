"""
Lazily evaluated, chainable views over the items of a container.

A Queryable holds a source callable plus a list of pending steps. Chaining
(``where``, ``select``, ``order_by``, ...) returns a new Queryable and reads
nothing. The source is only called when the view is evaluated, so every
evaluation sees the container as it is at that moment.
"""

from itertools import islice
from typing import (
    Any,
    Callable,
    Generic,
    Iterable,
    Iterator,
    List,
    Optional,
    Tuple,
    TypeVar,
)

T = TypeVar("T")
U = TypeVar("U")

Step = Callable[[Iterable[Any]], Iterable[Any]]


class Queryable(Generic[T]):
    """Deferred query over a source of items.

    Args:
        source: Zero-argument callable returning the items to query. Called
            once per evaluation.
    """

    def __init__(
        self,
        source: Callable[[], Iterable[T]],
        steps: Tuple[Step, ...] = (),
    ) -> None:
        self._source = source
        self._steps = steps

    def _chain(self, step: Step) -> "Queryable[Any]":
        return Queryable(self._source, self._steps + (step,))

    def __iter__(self) -> Iterator[T]:
        items: Iterable[Any] = self._source()
        for step in self._steps:
            items = step(items)
        return iter(items)

    def where(self, predicate: Callable[[T], bool]) -> "Queryable[T]":
        return self._chain(lambda items: (i for i in items if predicate(i)))

    def select(self, selector: Callable[[T], U]) -> "Queryable[U]":
        return self._chain(lambda items: (selector(i) for i in items))

    def order_by(
        self, key: Callable[[T], Any], descending: bool = False
    ) -> "Queryable[T]":
        return self._chain(
            lambda items: sorted(items, key=key, reverse=descending)
        )

    def skip(self, count: int) -> "Queryable[T]":
        return self._chain(lambda items: islice(items, count, None))

    def take(self, count: int) -> "Queryable[T]":
        return self._chain(lambda items: islice(items, count))

    def to_list(self) -> List[T]:
        return list(self)

    def count(self) -> int:
        return sum(1 for _ in self)

    def any(self, predicate: Optional[Callable[[T], bool]] = None) -> bool:
        query = self.where(predicate) if predicate else self
        for _ in query:
            return True
        return False

    def first_or_none(
        self, predicate: Optional[Callable[[T], bool]] = None
    ) -> Optional[T]:
        query = self.where(predicate) if predicate else self
        return next(iter(query), None)
