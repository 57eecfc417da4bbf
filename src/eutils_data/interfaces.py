"""Capability interfaces shared by every E-utility data object.

Three capability classes define what callers can rely on:

* :class:`EUtilData` – every data object. Carries the operation kind
  (``eutil``, validated against :class:`~eutils_data.config.EUtil`), a free
  form ``datatype`` tag, an optional reference to the DOM fragment backing it,
  an ingestion entry point (``_add_data``) and a string rendering
  (``to_string``).
* :class:`HistoryI` – objects carrying NCBI server history (``WebEnv`` and
  ``QueryKey``) usable to chain further queries.
* :class:`ItemContainerI` – objects holding nested DocSum items (DocSums and
  Items themselves).

Concrete classes compose these by inheritance; callers test for a capability
with ``isinstance`` (``isinstance(obj, HistoryI)``).

Design notes:
        * ``_add_data`` and ``to_string`` raise :class:`NotImplementedError` on
          the interface; concrete classes must supply both.
        * History values are never copied: each accessor re-reads ``WebEnv`` /
          ``QueryKey`` from the backing DOM fragment.
        * ``get_all_Items`` is memoized per container instance.
"""

from __future__ import annotations

import textwrap
from typing import TYPE_CHECKING, Any, List, Optional, Tuple, Union

from .config import EUtil, ParserConfig
from .cursor import CursorMixin
from .dom import Element, find_text

if TYPE_CHECKING:  # pragma: no cover - for type checkers only
    from .summary import Item

FLATTEN = "flatten"


def format_row(
    label: str,
    value: Any,
    label_width: int = 20,
    wrap_width: int = 80,
    level: int = 0,
) -> str:
    """Render one ``label : value`` table row.

    The label is indented by ``level`` columns and padded so the ``:`` column
    stays at ``label_width``. Long values wrap at ``wrap_width``; continuation
    lines repeat the ``:`` column.

    Example:
        >>> format_row("Count", 42)
        'Count               :42\\n'
    """
    pad = max(label_width - level, 1)
    prefix = " " * level + f"{label:<{pad}}:"
    continuation = " " * (level + pad) + ":"
    width = max(wrap_width - len(prefix), 10)
    lines = textwrap.wrap(str(value), width=width) or [""]
    rows = [prefix + lines[0]] + [continuation + line for line in lines[1:]]
    return "\n".join(rows) + "\n"


class EUtilData(CursorMixin):
    """Interface implemented by every E-utility data object.

    Args:
        eutil: Operation kind that produced the data (see :class:`EUtil`).
        datatype: Finer grained data type tag (``"fieldinfo"``, ``"docsum"``...).
        node: DOM fragment backing the object, when it is a live view.
        config: Rendering configuration inherited from the owning result.

    Raises:
        ConfigurationError: If ``eutil`` is not a recognized operation kind.
    """

    def __init__(
        self,
        eutil: Optional[Union[str, EUtil]] = None,
        datatype: Optional[str] = None,
        node: Optional[Element] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        self._eutil: Optional[EUtil] = None
        if eutil is not None:
            self.eutil = eutil
        self._datatype = datatype
        self._node = node
        self.config = config or ParserConfig()

    @property
    def eutil(self) -> Optional[EUtil]:
        """Operation kind; assignment validates against :class:`EUtil`."""
        return self._eutil

    @eutil.setter
    def eutil(self, value: Union[str, EUtil]) -> None:
        self._eutil = EUtil.coerce(value)

    @property
    def datatype(self) -> Optional[str]:
        return self._datatype

    @datatype.setter
    def datatype(self, value: Optional[str]) -> None:
        self._datatype = value

    @property
    def node(self) -> Optional[Element]:
        """DOM fragment backing this object (experimental)."""
        return self._node

    @node.setter
    def node(self, value: Optional[Element]) -> None:
        self._node = value

    def _ensure_parsed(self) -> None:
        """Hook run before data access; result objects trigger the parse gate."""

    def _add_data(self, chunk: Any) -> None:
        """Populate this object from one data chunk (DOM fragment or flat mapping)."""
        raise NotImplementedError(f"{type(self).__name__} does not implement _add_data")

    def to_string(self) -> str:
        """Render the populated fields of this object as a text table."""
        raise NotImplementedError(f"{type(self).__name__} does not implement to_string")

    def _row(self, label: str, value: Any, level: int = 0) -> str:
        return format_row(
            label,
            value,
            label_width=self.config.label_width,
            wrap_width=self.config.wrap_width,
            level=level,
        )

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        eutil = self._eutil.value if self._eutil else None
        return f"<{type(self).__name__} eutil={eutil} datatype={self._datatype}>"


class HistoryI(EUtilData):
    """Capability for objects carrying server history (``WebEnv``/``QueryKey``).

    Subclasses point the lookups at the right DOM fragments by overriding
    :meth:`_webenv_context` / :meth:`_query_key_context`; both default to
    :attr:`node`.

    Example:
        if isinstance(obj, HistoryI) and obj.has_History():
            webenv, query_key = obj.history()
    """

    def _webenv_context(self) -> Optional[Element]:
        return self.node

    def _query_key_context(self) -> Optional[Element]:
        return self.node

    def history(self) -> Tuple[Optional[str], Optional[str]]:
        """Return the ``(webenv, query_key)`` pair, parsing first if needed."""
        self._ensure_parsed()
        return self.get_webenv(), self.get_query_key()

    def get_webenv(self) -> Optional[str]:
        """Return the web environment key needed to reuse server results."""
        self._ensure_parsed()
        return find_text(self._webenv_context(), ".//WebEnv")

    def get_query_key(self) -> Optional[str]:
        """Return the query key (history number) within the web session."""
        self._ensure_parsed()
        return find_text(self._query_key_context(), ".//QueryKey")

    def has_History(self) -> bool:
        return self.get_webenv() is not None


class ItemContainerI(EUtilData):
    """Capability for objects holding nested DocSum items.

    Implementations keep their immediate children in ``self._items``. The
    flattened view lists each item followed immediately by all of its
    descendants (pre-order, document order)::

         1         2        7        8
        Item  -   Item  -  Item  -  Item ...
                   |
                   | 3        6
                ListItem - ListItem
                   |
                   | 4          5
                Structure - Structure
    """

    _items: List["Item"]
    _ordered_items: Optional[List["Item"]] = None

    def get_Items(self) -> List["Item"]:
        """Return the immediate (one level) items, empty if none."""
        return list(getattr(self, "_items", []))

    def get_all_Items(self) -> List["Item"]:
        """Return every nested item in pre-order.

        The flattening is computed once per container and reused afterwards.
        """
        if self._ordered_items is None:
            ordered: List["Item"] = []
            for item in self.get_Items():
                ordered.append(item)
                ordered.extend(item.get_all_Items())
            self._ordered_items = ordered
        return list(self._ordered_items)

    def next_Item(self, mode: Optional[str] = None) -> Optional["Item"]:
        """Iterate through items.

        Args:
            mode: ``"flatten"`` iterates the :meth:`get_all_Items` sequence;
                otherwise the one-level :meth:`get_Items` sequence. Only the
                first call (after construction or a rewind) selects the mode.
        """
        if mode == FLATTEN:
            return self._next("items", self.get_all_Items)
        return self._next("items", self.get_Items)

    def get_all_names(self) -> List[str]:
        """Return the unique names of all nested items in document order."""
        names: List[str] = []
        for item in self.get_all_Items():
            name = item.get_name()
            if name is not None and name not in names:
                names.append(name)
        return names

    def get_Items_by_name(self, name: Optional[str]) -> List["Item"]:
        if not name:
            return []
        return [item for item in self.get_all_Items() if item.get_name() == name]

    def get_contents_by_name(self, name: Optional[str]) -> List[Optional[str]]:
        """Return the content of every item called ``name`` (empty on miss)."""
        return [item.get_content() for item in self.get_Items_by_name(name)]

    def get_type_by_name(self, name: Optional[str]) -> Optional[str]:
        """Return the declared type of the first item called ``name`` (None on miss)."""
        matches = self.get_Items_by_name(name)
        if not matches:
            return None
        return matches[0].get_type()

    def _rewind_children(self) -> List["Item"]:
        return self.get_Items()
