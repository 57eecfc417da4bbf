"""esummary results: document summaries and their nested items.

Each ``<DocSum>`` holds an ``<Id>`` and a sequence of ``<Item>`` elements with
``Name`` and ``Type`` attributes. Items of type ``List`` or ``Structure`` hold
further ``<Item>`` children instead of text:

.. code-block:: xml

    <DocSum>
        <Id>123</Id>
        <Item Name="CreateDate" Type="String">2020-01-01</Item>
        <Item Name="AuthorList" Type="List">
            <Item Name="Author" Type="String">Smith J</Item>
        </Item>
    </DocSum>

The whole tree is materialized when the document is ingested. Children of a
``List`` item become :class:`ListItem` objects and children of a ``Structure``
item become :class:`StructureItem` objects; the same rule applies at any depth.
Every item remembers the ID of the DocSum it belongs to.

Example:
        from eutils_data.summary import Summary

        summary = Summary(content=xml_bytes)
        while (docsum := summary.next_DocSum()) is not None:
                print(docsum.get_id(), docsum.get_contents_by_name("Title"))
                while (item := docsum.next_Item("flatten")) is not None:
                        print(item.datatype, item.get_name(), item.get_content())
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Type

from .config import EUtil, ParserConfig
from .dom import Element, find_all, find_text
from .interfaces import ItemContainerI
from .result import EUtilResult

logger = logging.getLogger(__name__)

LIST_TYPE = "List"
STRUCTURE_TYPE = "Structure"


class Item(ItemContainerI):
    """Named, typed DocSum entry.

    Flat items carry :meth:`get_content`; ``List`` and ``Structure`` items
    carry child items instead and report no content.

    Args:
        docsum_id: ID of the owning DocSum.
        config: Rendering configuration.
    """

    item_datatype = "item"

    def __init__(
        self, docsum_id: Optional[str] = None, config: Optional[ParserConfig] = None
    ) -> None:
        super().__init__(eutil=EUtil.ESUMMARY, datatype=self.item_datatype, config=config)
        self._docsum_id = docsum_id
        self._name: Optional[str] = None
        self._type: Optional[str] = None
        self._content: Optional[str] = None
        self._items: List[Item] = []

    def _add_data(self, chunk: Element) -> None:
        self.node = chunk
        self._name = chunk.get("Name")
        self._type = chunk.get("Type")
        child_class = CHILD_ITEM_CLASSES.get(self._type or "")
        if child_class is None:
            self._content = (chunk.text or "").strip()
        else:
            self._items = build_items(chunk, child_class, self._docsum_id, self.config)

    def get_id(self) -> Optional[str]:
        """Return the ID of the DocSum this item belongs to."""
        return self._docsum_id

    def get_name(self) -> Optional[str]:
        return self._name

    def get_type(self) -> Optional[str]:
        """Return the declared type (``String``, ``Integer``, ``Date``, ``List``...)."""
        return self._type

    def get_content(self) -> Optional[str]:
        return self._content

    def is_container(self) -> bool:
        return self._type in CHILD_ITEM_CLASSES

    def get_ListItems(self) -> List[ListItem]:
        return [item for item in self._items if isinstance(item, ListItem)]

    def next_ListItem(self) -> Optional[ListItem]:
        return self._next("listitems", self.get_ListItems)

    def get_StructureItems(self) -> List[StructureItem]:
        return [item for item in self._items if isinstance(item, StructureItem)]

    def next_StructureItem(self) -> Optional[StructureItem]:
        return self._next("structureitems", self.get_StructureItems)

    def to_string(self, level: int = 0) -> str:
        if self.is_container():
            string = self._row(self._name or "", f"[{self._type}]", level)
        else:
            string = self._row(self._name or "", self._content or "", level)
        for item in self._items:
            string += item.to_string(level + 2)
        return string


class ListItem(Item):
    """Child of a ``List`` item."""

    item_datatype = "listitem"


class StructureItem(Item):
    """Child of a ``Structure`` item."""

    item_datatype = "structureitem"


CHILD_ITEM_CLASSES: Dict[str, Type[Item]] = {
    LIST_TYPE: ListItem,
    STRUCTURE_TYPE: StructureItem,
}


def build_items(
    parent: Element,
    item_class: Type[Item],
    docsum_id: Optional[str],
    config: Optional[ParserConfig] = None,
) -> List[Item]:
    """Materialize the immediate ``<Item>`` children of ``parent``, recursively."""
    items: List[Item] = []
    for element in find_all(parent, "Item"):
        item = item_class(docsum_id=docsum_id, config=config)
        item._add_data(element)
        items.append(item)
    return items


class DocSum(ItemContainerI):
    """Summary of one database record."""

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        super().__init__(eutil=EUtil.ESUMMARY, datatype="docsum", config=config)
        self._id: Optional[str] = None
        self._items: List[Item] = []

    def _add_data(self, chunk: Element) -> None:
        self.node = chunk
        self._id = find_text(chunk, "Id")
        if self._id is not None:
            self._id = self._id.strip()
        self._items = build_items(chunk, Item, self._id, self.config)

    def get_id(self) -> Optional[str]:
        return self._id

    def get_ids(self) -> List[str]:
        return [self._id] if self._id else []

    def to_string(self) -> str:
        string = self._row("UID", self._id or "")
        for item in self.get_Items():
            string += item.to_string(level=2)
        return string


class Summary(EUtilResult):
    """Result of an esummary request.

    Iterators:
        ``next_DocSum``; reset with ``rewind('docsums')``, ``rewind()`` or
        ``rewind('recursive')`` (which also resets every DocSum and item).
    """

    eutils = (EUtil.ESUMMARY,)
    default_datatype = "esummary"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._docsums: List[DocSum] = []

    def _ingest(self, root: Element) -> None:
        elements = find_all(root, "DocSum")
        if not elements:
            logger.warning("No returned docsums.")
            return
        for element in elements:
            docsum = DocSum(config=self.config)
            docsum._add_data(element)
            self._docsums.append(docsum)

    def get_DocSums(self) -> List[DocSum]:
        self._ensure_parsed()
        return list(self._docsums)

    def next_DocSum(self) -> Optional[DocSum]:
        self._ensure_parsed()
        return self._next("docsums", self.get_DocSums)

    def get_ids(self) -> List[str]:
        """Return the DocSum IDs in document order."""
        ids: List[str] = []
        for docsum in self.get_DocSums():
            ids.extend(docsum.get_ids())
        return ids

    def to_string(self) -> str:
        return "".join(docsum.to_string() + "\n" for docsum in self.get_DocSums())

    def _rewind_children(self) -> List[DocSum]:
        return list(self._docsums)
