"""einfo results: database descriptions, search fields and link names.

einfo answers in one of two shapes:

* without a database – ``<DbList>`` of every available database
  (datatype ``dblist``)
* with a database – ``<DbInfo>`` describing that database, its indexed search
  fields (``FieldList/Field``) and the links to other databases
  (``LinkList/Link``) (datatype ``dbinfo``)

Fields become :class:`FieldInfo` records whose values are copied out of the
document at ingestion time. Links become :class:`LinkInfo` views that keep a
reference to their ``<Link>`` element and query it on every accessor call.

Example:
        from eutils_data.info import Info

        info = Info(content=xml_bytes)
        print(info.get_database(), info.get_record_count())
        while (field := info.next_FieldInfo()) is not None:
                flags = [f for f in ("is_date", "is_numerical") if getattr(field, f)()]
                print(field.get_field_code(), field.get_field_name(), flags)
        for link in info.get_LinkInfo():
                print(link.get_link_name(), "->", link.get_dbto())
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Union

from .config import EUtil, ParserConfig
from .dom import Element, exists, find_all, find_all_text, find_text, flatten
from .interfaces import EUtilData
from .result import EUtilResult

logger = logging.getLogger(__name__)

AFFIRMATIVE = "Y"

FIELD_FLAGS = ("is_date", "is_singletoken", "is_hierarchy", "is_hidden", "is_numerical")


class FieldInfo(EUtilData):
    """Search field (index) of an Entrez database.

    Populated once from a flattened ``<Field>`` chunk; keys are stored
    lower-cased so ``TermCount`` and ``termcount`` are equivalent.
    """

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        super().__init__(eutil=EUtil.EINFO, datatype="fieldinfo", config=config)
        self._data: Dict[str, str] = {}

    def _add_data(self, chunk: Mapping[str, str]) -> None:
        for key, value in chunk.items():
            if isinstance(value, str):
                self._data[key.lower()] = value

    def get_database(self) -> Optional[str]:
        """Return the database the field belongs to."""
        return self._data.get("dbfrom")

    def get_term_count(self) -> Optional[str]:
        return self._data.get("termcount")

    def get_field_name(self) -> Optional[str]:
        """Return the full name of the field (``Title``)."""
        return self._data.get("fullname")

    def get_full_name(self) -> Optional[str]:
        return self.get_field_name()

    def get_field_code(self) -> Optional[str]:
        """Return the field code used in queries (``TITL``)."""
        return self._data.get("name")

    def get_field_description(self) -> Optional[str]:
        return self._data.get("description")

    def _flag(self, key: str) -> bool:
        return self._data.get(key) == AFFIRMATIVE

    def is_date(self) -> bool:
        return self._flag("isdate")

    def is_singletoken(self) -> bool:
        return self._flag("singletoken")

    def is_hierarchy(self) -> bool:
        return self._flag("hierarchy")

    def is_hidden(self) -> bool:
        return self._flag("ishidden")

    def is_numerical(self) -> bool:
        return self._flag("isnumerical")

    def to_string(self) -> str:
        rows = (
            ("Field Code", self.get_field_code()),
            ("Field Name", self.get_field_name()),
            ("Description", self.get_field_description()),
            ("Term Count", self.get_term_count()),
            ("Attributes", ",".join(f for f in FIELD_FLAGS if getattr(self, f)())),
        )
        return "".join(self._row(label, value or "") for label, value in rows)


class LinkInfo(EUtilData):
    """Named link between two Entrez databases, viewed through its DOM element.

    einfo describes links under ``DbInfo/LinkList/Link``; elink ``acheck``
    requests list them per ID under ``IdLinkSet/LinkInfo``. The two shapes use
    different tag names, so accessors switch on :attr:`eutil`. Priority, HTML
    tag and URL are only present in the elink shape; the URL is a template in
    which ``<@UID@>`` stands for a record identifier.

    Args:
        eutil: ``einfo`` (default) or ``elink``.
        context: Element the referring database is read from: the document
            root for einfo (``DbInfo/DbName``) or the enclosing ``LinkSet``
            group for elink (``DbFrom``).
        config: Rendering configuration.
    """

    def __init__(
        self,
        eutil: Union[str, EUtil] = EUtil.EINFO,
        context: Optional[Element] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        super().__init__(eutil=eutil, datatype="linkinfo", config=config)
        self._context = context

    def _add_data(self, chunk: Element) -> None:
        self.node = chunk

    def _is_elink(self) -> bool:
        return self.eutil == EUtil.ELINK

    def get_database(self) -> Optional[str]:
        """Return the database linked to."""
        return find_text(self.node, "DbTo")

    def get_db(self) -> Optional[str]:
        return self.get_database()

    def get_dbto(self) -> Optional[str]:
        return self.get_database()

    def get_dbfrom(self) -> Optional[str]:
        """Return the referring database."""
        if self._is_elink():
            return find_text(self._context, "DbFrom")
        return find_text(self._context, "DbInfo/DbName")

    def get_link_name(self) -> Optional[str]:
        """Return the raw (eutil compatible) link name, e.g. ``pubmed_protein``."""
        return find_text(self.node, "LinkName" if self._is_elink() else "Name")

    def get_link_description(self) -> Optional[str]:
        return find_text(self.node, "Description")

    def get_link_menu_name(self) -> Optional[str]:
        if self._is_elink():
            return find_text(self.node, "MenuTag")
        menu = find_text(self.node, "Menu")
        return menu if menu is not None else find_text(self.node, "MenuName")

    def get_priority(self) -> Optional[str]:
        return find_text(self.node, "Priority")

    def get_html_tag(self) -> Optional[str]:
        return find_text(self.node, "HtmlTag")

    def get_url(self) -> Optional[str]:
        """Return the URL template (``<@UID@>`` marks the record ID)."""
        return find_text(self.node, "Url")

    def to_string(self, level: int = 0) -> str:
        rows = (
            ("Link Name", self.get_link_name()),
            ("Description", self.get_link_description()),
            ("DB From", self.get_dbfrom()),
            ("DB To", self.get_dbto()),
            ("Menu Name", self.get_link_menu_name()),
            ("Priority", self.get_priority()),
            ("HTML Tag", self.get_html_tag()),
            ("URL", self.get_url()),
        )
        return "".join(self._row(label, value, level) for label, value in rows if value)


class Info(EUtilResult):
    """Result of an einfo request.

    Iterators:
        ``next_FieldInfo`` / ``next_LinkInfo``; reset with
        ``rewind('fieldinfo')``, ``rewind('linkinfo')`` or ``rewind()``.
    """

    eutils = (EUtil.EINFO,)
    default_datatype = "einfo"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._fieldinfo: List[FieldInfo] = []
        self._linkinfo: List[LinkInfo] = []

    def _ingest(self, root: Element) -> None:
        if exists(root, "DbList"):
            self._refine_datatype("dblist")
        elif exists(root, "DbInfo"):
            self._refine_datatype("dbinfo")
        else:
            logger.warning("No database information returned by einfo")
            return

        dbfrom = find_text(root, "DbInfo/DbName")
        for element in find_all(root, "DbInfo/FieldList/Field"):
            chunk = flatten(element)
            if dbfrom:
                chunk.setdefault("DbFrom", dbfrom)
            field = FieldInfo(config=self.config)
            field._add_data(chunk)
            self._fieldinfo.append(field)

        for element in find_all(root, "DbInfo/LinkList/Link"):
            link = LinkInfo(eutil=EUtil.EINFO, context=root, config=self.config)
            link._add_data(element)
            self._linkinfo.append(link)

    def get_available_databases(self) -> List[str]:
        """Return the eutil-compatible database names (``dblist`` documents)."""
        self._ensure_parsed()
        return find_all_text(self.dom, "DbList/DbName")

    def get_databases(self) -> List[str]:
        """Return the described database, or every available database."""
        self._ensure_parsed()
        database = find_text(self.dom, "DbInfo/DbName")
        if database:
            return [database]
        return self.get_available_databases()

    def get_record_count(self) -> Optional[str]:
        self._ensure_parsed()
        return find_text(self.dom, "DbInfo/Count")

    def get_last_update(self) -> Optional[str]:
        """Return the date/time stamp of the last database update."""
        self._ensure_parsed()
        return find_text(self.dom, "DbInfo/LastUpdate")

    def get_menu_name(self) -> Optional[str]:
        self._ensure_parsed()
        return find_text(self.dom, "DbInfo/MenuName")

    def get_description(self) -> Optional[str]:
        self._ensure_parsed()
        return find_text(self.dom, "DbInfo/Description")

    def get_FieldInfo(self) -> List[FieldInfo]:
        self._ensure_parsed()
        return list(self._fieldinfo)

    def get_FieldInfos(self) -> List[FieldInfo]:
        return self.get_FieldInfo()

    def next_FieldInfo(self) -> Optional[FieldInfo]:
        self._ensure_parsed()
        return self._next("fieldinfo", self.get_FieldInfo)

    def get_LinkInfo(self) -> List[LinkInfo]:
        self._ensure_parsed()
        return list(self._linkinfo)

    def get_LinkInfos(self) -> List[LinkInfo]:
        return self.get_LinkInfo()

    def next_LinkInfo(self) -> Optional[LinkInfo]:
        self._ensure_parsed()
        return self._next("linkinfo", self.get_LinkInfo)

    def to_string(self) -> str:
        self._ensure_parsed()
        string = ""
        databases = self.get_databases()
        if databases:
            string += self._row("DB", ", ".join(databases)) + "\n"
        for label, value in (
            ("Description", self.get_description()),
            ("Menu Name", self.get_menu_name()),
            ("Record Count", self.get_record_count()),
            ("Last Update", self.get_last_update()),
        ):
            if value:
                string += self._row(label, value)
        for field in self.get_FieldInfo():
            string += field.to_string() + "\n"
        for link in self.get_LinkInfo():
            string += link.to_string() + "\n"
        return string
