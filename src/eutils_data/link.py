"""elink results and link-set classification.

An elink document holds one ``<LinkSet>`` group per request (or per ID when
IDs are passed separately). What a group contains depends on the ``cmd`` of
the request, and each shape is read differently:

==============  ====================  ==========================================
kind            marker element        meaningful accessors
==============  ====================  ==========================================
``dblink``      ``LinkSetDb``         ``get_ids``, ``get_scores``, ``get_dbto``
``history``     ``LinkSetDbHistory``  ``history``, ``get_dbto``
``urllink``     ``IdUrlSet``          ``get_ids``, ``get_UrlLinks``
``idcheck``     ``IdCheckList``       ``get_ids``, ``has_neighbor``,
                                      ``has_linkout``, ``get_LinkInfo``
``nolinks``     (none of the above)   ``get_ids`` (submitted), ``get_warnings``
==============  ====================  ==========================================

Classification tests the markers in the order above and the first match wins.
The response to one request is uniform, so the kind is decided on the first
usable group and reused for every later group of the same document without
re-testing. A later group of a different shape is therefore searched for the
first group's marker, and contributes nothing when it has none. Groups that
carry an ``ERROR`` message are logged and skipped before classification.

Within a group one :class:`LinkSet` is built per marker element. Each LinkSet
is a live view over that element plus its group, from which it inherits the
referring database (``DbFrom``), the submitted IDs (``IdList``) and the
``WebEnv``.

Example:
        from eutils_data.link import Link

        link = Link(content=xml_bytes)
        while (linkset := link.next_LinkSet()) is not None:
                print(linkset.kind.value, linkset.get_dbfrom(), "->", linkset.get_dbto())
                print(linkset.get_ids())
        for hist in link.get_Histories():
                print(hist.history())
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Dict, List, Optional

from .config import EUtil, ParserConfig
from .dom import Element, exists, find_all, find_all_text, find_text
from .info import AFFIRMATIVE, LinkInfo
from .interfaces import EUtilData, HistoryI
from .result import EUtilResult

logger = logging.getLogger(__name__)


class LinkSetKind(str, Enum):
    """The five mutually exclusive link-set shapes."""

    DBLINK = "dblink"
    HISTORY = "history"
    URLLINK = "urllink"
    IDCHECK = "idcheck"
    NOLINKS = "nolinks"

    @property
    def marker(self) -> Optional[str]:
        """Element name identifying this shape inside a ``LinkSet`` group."""
        return LINKSET_MARKERS.get(self)


LINKSET_MARKERS: Dict[LinkSetKind, str] = {
    LinkSetKind.DBLINK: "LinkSetDb",
    LinkSetKind.HISTORY: "LinkSetDbHistory",
    LinkSetKind.URLLINK: "IdUrlSet",
    LinkSetKind.IDCHECK: "IdCheckList",
}


def classify_linkset_group(group: Element) -> LinkSetKind:
    """Return the shape of one ``LinkSet`` group.

    Markers are tested in priority order (``LinkSetDb``, ``LinkSetDbHistory``,
    ``IdUrlSet``, ``IdCheckList``) against exact element names anywhere below
    the group; with no marker present the group is ``nolinks``.
    """
    for kind, marker in LINKSET_MARKERS.items():
        if exists(group, f".//{marker}"):
            return kind
    return LinkSetKind.NOLINKS


class UrlLink(EUtilData):
    """LinkOut (external URL) entry of an ``IdUrlSet``, viewed through its ``ObjUrl`` element.

    Args:
        context: Enclosing ``LinkSet`` group (source of ``DbFrom``).
        config: Rendering configuration.
    """

    def __init__(
        self, context: Optional[Element] = None, config: Optional[ParserConfig] = None
    ) -> None:
        super().__init__(eutil=EUtil.ELINK, datatype="urllink", config=config)
        self._context = context

    def _add_data(self, chunk: Element) -> None:
        self.node = chunk

    def get_dbfrom(self) -> Optional[str]:
        return find_text(self._context, "DbFrom")

    def get_attribute(self) -> Optional[str]:
        """Return the first attribute (``subscription/membership required``...)."""
        return find_text(self.node, "Attribute")

    def get_attributes(self) -> List[str]:
        return find_all_text(self.node, "Attribute")

    def get_icon_url(self) -> Optional[str]:
        return find_text(self.node, "IconUrl")

    def get_subject_type(self) -> Optional[str]:
        return find_text(self.node, "SubjectType")

    def get_url(self) -> Optional[str]:
        return find_text(self.node, "Url")

    def get_link_name(self) -> Optional[str]:
        return find_text(self.node, "LinkName")

    def get_provider_name(self) -> Optional[str]:
        return find_text(self.node, "Provider/Name")

    def get_provider_abbr(self) -> Optional[str]:
        return find_text(self.node, "Provider/NameAbbr")

    def get_provider_id(self) -> Optional[str]:
        return find_text(self.node, "Provider/Id")

    def get_provider_icon_url(self) -> Optional[str]:
        return find_text(self.node, "Provider/IconUrl")

    def get_provider_url(self) -> Optional[str]:
        return find_text(self.node, "Provider/Url")

    def to_string(self, level: int = 0) -> str:
        rows = (
            ("Link Name", self.get_link_name()),
            ("Subject Type", self.get_subject_type()),
            ("DB From", self.get_dbfrom()),
            ("Attribute", self.get_attribute()),
            ("IconURL", self.get_icon_url()),
            ("URL", self.get_url()),
            ("Provider", self.get_provider_name()),
            ("ProvAbbr", self.get_provider_abbr()),
            ("ProvID", self.get_provider_id()),
            ("ProvURL", self.get_provider_url()),
            ("ProvIcon", self.get_provider_icon_url()),
        )
        return "".join(self._row(label, value, level) for label, value in rows if value)


class LinkSet(HistoryI):
    """One classified link result.

    Args:
        kind: Shape of the enclosing document (fixed for the object's lifetime).
        group: Enclosing ``LinkSet`` group element.
        config: Rendering configuration.

    Accessors that do not apply to :attr:`kind` return an empty list or None.
    """

    def __init__(
        self,
        kind: LinkSetKind,
        group: Optional[Element] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        super().__init__(eutil=EUtil.ELINK, datatype=kind.value, config=config)
        self._kind = kind
        self._group = group
        self._urllinks: Optional[List[UrlLink]] = None
        self._linkinfo: Optional[List[LinkInfo]] = None

    def _add_data(self, chunk: Element) -> None:
        self.node = chunk

    @property
    def kind(self) -> LinkSetKind:
        return self._kind

    def _webenv_context(self) -> Optional[Element]:
        return self._group

    def _query_key_context(self) -> Optional[Element]:
        return self.node

    def _targets_database(self) -> bool:
        return self._kind in (LinkSetKind.DBLINK, LinkSetKind.HISTORY)

    def get_dbfrom(self) -> Optional[str]:
        """Return the referring database."""
        return find_text(self._group, "DbFrom")

    def get_dbto(self) -> Optional[str]:
        """Return the database linked to (dblink and history link sets)."""
        if not self._targets_database():
            return None
        return find_text(self.node, "DbTo")

    def get_database(self) -> Optional[str]:
        return self.get_dbto()

    def get_db(self) -> Optional[str]:
        return self.get_dbto()

    def get_databases(self) -> List[str]:
        """Return the target database, or the referring one when there is none."""
        database = self.get_dbto() or self.get_dbfrom()
        return [database] if database else []

    def get_link_name(self) -> Optional[str]:
        if not self._targets_database():
            return None
        return find_text(self.node, "LinkName")

    def get_submitted_ids(self) -> List[str]:
        """Return the IDs sent with the request (the group ``IdList``)."""
        return find_all_text(self._group, "IdList/Id")

    def get_ids(self) -> List[str]:
        """Return the IDs this link set is about.

        dblink: linked IDs; urllink / idcheck: the checked IDs; nolinks: the
        submitted IDs; history: none (the IDs stay on the server).
        """
        if self._kind is LinkSetKind.DBLINK:
            return find_all_text(self.node, "Link/Id")
        if self._kind is LinkSetKind.URLLINK:
            return find_all_text(self.node, "Id")
        if self._kind is LinkSetKind.IDCHECK:
            return find_all_text(self.node, ".//Id")
        if self._kind is LinkSetKind.NOLINKS:
            return self.get_submitted_ids()
        return []

    def get_scores(self) -> Dict[str, str]:
        """Return ``{id: score}`` for scored dblink results (neighbor requests)."""
        if self._kind is not LinkSetKind.DBLINK:
            return {}
        scores: Dict[str, str] = {}
        for link in find_all(self.node, "Link"):
            link_id = find_text(link, "Id")
            score = find_text(link, "Score")
            if link_id is not None and score is not None:
                scores[link_id] = score
        return scores

    def has_scores(self) -> bool:
        return bool(self.get_scores())

    def _id_flag(self, record_id: str, attribute: str) -> bool:
        if self._kind is not LinkSetKind.IDCHECK:
            return False
        for element in find_all(self.node, ".//Id"):
            if (element.text or "").strip() == record_id:
                return element.get(attribute) == AFFIRMATIVE
        return False

    def has_neighbor(self, record_id: str) -> bool:
        """Return True if ncheck reported Entrez neighbors for ``record_id``."""
        return self._id_flag(record_id, "HasNeighbor")

    def has_linkout(self, record_id: str) -> bool:
        """Return True if lcheck reported LinkOut resources for ``record_id``."""
        return self._id_flag(record_id, "HasLinkOut")

    def get_UrlLinks(self) -> List[UrlLink]:
        if self._urllinks is None:
            self._urllinks = []
            if self._kind is LinkSetKind.URLLINK:
                for element in find_all(self.node, "ObjUrl"):
                    urllink = UrlLink(context=self._group, config=self.config)
                    urllink._add_data(element)
                    self._urllinks.append(urllink)
        return list(self._urllinks)

    def next_UrlLink(self) -> Optional[UrlLink]:
        return self._next("urllinks", self.get_UrlLinks)

    def get_LinkInfo(self) -> List[LinkInfo]:
        """Return per-ID link descriptions of an acheck request."""
        if self._linkinfo is None:
            self._linkinfo = []
            if self._kind is LinkSetKind.IDCHECK:
                for element in find_all(self.node, ".//LinkInfo"):
                    info = LinkInfo(eutil=EUtil.ELINK, context=self._group, config=self.config)
                    info._add_data(element)
                    self._linkinfo.append(info)
        return list(self._linkinfo)

    def next_LinkInfo(self) -> Optional[LinkInfo]:
        return self._next("linkinfo", self.get_LinkInfo)

    def get_warnings(self) -> List[str]:
        """Return informational messages attached to the group."""
        messages = find_all_text(self._group, "Info") + find_all_text(self._group, "Warning")
        return [message.strip() for message in messages if message.strip()]

    def to_string(self) -> str:
        rows = (
            ("Link Set", self._kind.value),
            ("DB From", self.get_dbfrom()),
            ("DB To", self.get_dbto()),
            ("Link Name", self.get_link_name()),
            ("Submitted IDs", ", ".join(self.get_submitted_ids())),
            ("IDs", ", ".join(self.get_ids())),
            ("WebEnv", self.get_webenv()),
            ("Query Key", self.get_query_key()),
            ("Warnings", "; ".join(self.get_warnings())),
        )
        string = "".join(self._row(label, value) for label, value in rows if value)
        for urllink in self.get_UrlLinks():
            string += urllink.to_string(level=4)
        for info in self.get_LinkInfo():
            string += info.to_string(level=4)
        return string


class Link(EUtilResult):
    """Result of an elink request.

    Iterators:
        ``next_LinkSet`` and ``next_History`` (history-bearing link sets);
        reset with ``rewind('linksets')``, ``rewind('histories')``,
        ``rewind()`` or ``rewind('recursive')``.
    """

    eutils = (EUtil.ELINK,)
    default_datatype = "elink"

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._linksets: List[LinkSet] = []
        self._histories: List[LinkSet] = []
        self._linkset_kind: Optional[LinkSetKind] = None

    def _ingest(self, root: Element) -> None:
        groups = find_all(root, "LinkSet")
        if not groups:
            logger.warning("No linksets returned")
            return
        for group in groups:
            error = (find_text(group, "ERROR") or "").strip()
            if error:
                logger.warning(f"NCBI LinkSet error: {find_text(group, 'DbFrom')}: {error}")
                continue
            if self._linkset_kind is None:
                self._linkset_kind = classify_linkset_group(group)
            kind = self._linkset_kind
            if kind is LinkSetKind.NOLINKS:
                elements = [group]
            else:
                elements = find_all(group, f".//{kind.marker}")
            for element in elements:
                linkset = LinkSet(kind, group=group, config=self.config)
                linkset._add_data(element)
                self._linksets.append(linkset)
                if kind is LinkSetKind.HISTORY:
                    self._histories.append(linkset)

    def get_linkset_kind(self) -> Optional[LinkSetKind]:
        """Return the shape decided for this document (None if no usable group)."""
        self._ensure_parsed()
        return self._linkset_kind

    def get_LinkSets(self) -> List[LinkSet]:
        self._ensure_parsed()
        return list(self._linksets)

    def next_LinkSet(self) -> Optional[LinkSet]:
        self._ensure_parsed()
        return self._next("linksets", self.get_LinkSets)

    def get_Histories(self) -> List[LinkSet]:
        self._ensure_parsed()
        return list(self._histories)

    def next_History(self) -> Optional[LinkSet]:
        self._ensure_parsed()
        return self._next("histories", self.get_Histories)

    def get_ids(self, database: Optional[str] = None) -> List[str]:
        """Return the IDs of every link set, in order.

        Args:
            database: Only include link sets targeting this database. When
                omitted and several target databases are present the IDs are
                combined and a warning is logged as a reminder.
        """
        linksets = self.get_LinkSets()
        if database:
            linksets = [ls for ls in linksets if ls.get_dbto() == database]
        elif len({ls.get_dbto() for ls in linksets if ls.get_dbto()}) > 1:
            logger.warning(
                "Multiple databases present; IDs are combined. "
                "Pass a database name to select one"
            )
        ids: List[str] = []
        for linkset in linksets:
            ids.extend(linkset.get_ids())
        return ids

    def get_databases(self) -> List[str]:
        """Return the databases collected from each link set (unique, in order)."""
        databases: List[str] = []
        for linkset in self.get_LinkSets():
            for database in linkset.get_databases():
                if database not in databases:
                    databases.append(database)
        return databases

    def to_string(self) -> str:
        return "".join(linkset.to_string() + "\n" for linkset in self.get_LinkSets())

    def _rewind_children(self) -> List[LinkSet]:
        return list(self._linksets)
