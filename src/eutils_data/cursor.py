"""Resettable cursors behind every ``next_X`` accessor.

Each collection exposed as ``get_X`` also has a stateful ``next_X`` accessor.
The first ``next_X`` call snapshots ``get_X`` into a :class:`Cursor` cached on
the owning object under a kind name (``"fieldinfo"``, ``"items"``, ...). Later
calls advance that cursor until it is exhausted, after which it keeps
returning ``None``. :meth:`CursorMixin.rewind` discards cached cursors so the
next ``next_X`` call rebuilds from the live collection. Rewinding never
re-parses or re-ingests anything.

Example:
        while (field := info.next_FieldInfo()) is not None:
                print(field.get_field_code())
        info.rewind("fieldinfo")   # or info.rewind() for every cursor
"""

from __future__ import annotations

from typing import Any, Callable, Dict, Generic, Iterable, Iterator, List, Optional, TypeVar

T = TypeVar("T")

ALL = "all"
RECURSIVE = "recursive"


class Cursor(Generic[T]):
    """Forward-only position over a snapshot of a sequence.

    The snapshot is taken at construction; later changes to the source
    collection are not observed until a new cursor is built.
    """

    def __init__(self, items: Iterable[T]) -> None:
        self._items: List[T] = list(items)
        self._position = 0

    def next(self) -> Optional[T]:
        """Return the next element, or ``None`` once exhausted."""
        if self._position >= len(self._items):
            return None
        item = self._items[self._position]
        self._position += 1
        return item

    def reset(self) -> None:
        self._position = 0

    @property
    def remaining(self) -> int:
        return len(self._items) - self._position

    def __iter__(self) -> Iterator[T]:
        return self

    def __next__(self) -> T:
        if self._position >= len(self._items):
            raise StopIteration
        return self.next()  # type: ignore[return-value]


class CursorMixin:
    """Cache of named cursors with a ``rewind`` operation."""

    def _cursor(self, kind: str, source: Callable[[], Iterable[Any]]) -> Cursor:
        """Return the cached cursor for ``kind``, building it from ``source`` if absent."""
        cursors: Dict[str, Cursor] = self.__dict__.setdefault("_cursors", {})
        cursor = cursors.get(kind)
        if cursor is None:
            cursor = Cursor(source())
            cursors[kind] = cursor
        return cursor

    def _next(self, kind: str, source: Callable[[], Iterable[Any]]) -> Any:
        return self._cursor(kind, source).next()

    def rewind(self, scope: Optional[str] = ALL) -> None:
        """Reset cursors on this object.

        Args:
            scope: A cursor kind name (``"linksets"``, ``"items"``, ...),
                ``"all"`` / ``None`` for every cursor on this object, or
                ``"recursive"`` to additionally rewind every owned child
                container. Kinds that have no cursor yet are ignored.
        """
        scope = (scope or ALL).lower()
        cursors: Dict[str, Cursor] = self.__dict__.setdefault("_cursors", {})
        if scope in (ALL, RECURSIVE):
            cursors.clear()
        else:
            cursors.pop(scope, None)
        if scope == RECURSIVE:
            for child in self._rewind_children():
                child.rewind(RECURSIVE)

    def _rewind_children(self) -> Iterable["CursorMixin"]:
        """Child containers reached by ``rewind('recursive')``; none by default."""
        return ()
