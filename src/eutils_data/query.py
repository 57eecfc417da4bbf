"""Query-type results: esearch, epost, espell and egquery.

All four operations answer with small flat documents, so a single
:class:`Query` class handles them and refines its ``datatype`` once the
document is parsed:

=========  ================
eutil      datatype
=========  ================
esearch    ``singledbquery``
egquery    ``multidbquery``
espell     ``spelling``
epost      ``history``
=========  ================

A :class:`~eutils_data.history.History` token is attached whenever the
document carries a ``WebEnv`` anywhere (epost, esearch with
``usehistory=y``). egquery results are split into one :class:`GlobalQuery`
per ``ResultItem``, each tagged with the global search term.

Example:
        from eutils_data.query import Query

        search = Query("esearch", content=xml_bytes)
        search.get_count()                # '42'
        search.get_ids()                  # ['1', '2']
        if search.has_History():
                webenv, query_key = search.history()

        gquery = Query("egquery", content=other_bytes)
        for gq in gquery.get_GlobalQueries():
                print(gq.get_database(), gq.get_count(), gq.get_status())
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from .config import EUtil, ParserConfig
from .dom import Element, exists, find_all, find_all_text, find_text, flatten
from .history import History
from .interfaces import EUtilData, HistoryI
from .result import EUtilResult

logger = logging.getLogger(__name__)

QUERY_DATATYPES: Dict[EUtil, str] = {
    EUtil.ESPELL: "spelling",
    EUtil.ESEARCH: "singledbquery",
    EUtil.EGQUERY: "multidbquery",
    EUtil.EPOST: "history",
}


class GlobalQuery(EUtilData):
    """Hit count of one database in an egquery (global query) result."""

    def __init__(self, config: Optional[ParserConfig] = None) -> None:
        super().__init__(eutil=EUtil.EGQUERY, datatype="globalquery", config=config)
        self._data: Dict[str, str] = {}

    def _add_data(self, chunk: Mapping[str, str]) -> None:
        for key, value in chunk.items():
            self._data[key.lower()] = value

    def get_term(self) -> Optional[str]:
        return self._data.get("term")

    def get_database(self) -> Optional[str]:
        return self._data.get("dbname")

    def get_count(self) -> Optional[str]:
        return self._data.get("count")

    def get_status(self) -> Optional[str]:
        """Return the query status for this database (``Ok``, ``Term or Database is not found``...)."""
        return self._data.get("status")

    def get_menu_name(self) -> Optional[str]:
        return self._data.get("menuname")

    def to_string(self) -> str:
        return (
            f"{self.get_database() or '':<20} Total:{self.get_count() or '':<10} "
            f"Status:{self.get_status() or ''}\n"
        )


class Query(EUtilResult, HistoryI):
    """Result of an esearch, epost, espell or egquery request.

    Iterators:
        ``next_GlobalQuery`` (egquery) and ``next_History``; reset with
        ``rewind('globalqueries')``, ``rewind('histories')`` or ``rewind()``.
    """

    eutils = (EUtil.ESEARCH, EUtil.EPOST, EUtil.ESPELL, EUtil.EGQUERY)

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._histories: List[History] = []
        self._globalqueries: List[GlobalQuery] = []

    def _ingest(self, root: Element) -> None:
        self._refine_datatype(QUERY_DATATYPES[self.eutil])

        if exists(root, ".//WebEnv"):
            token = History(eutil=self.eutil, config=self.config)
            token._add_data(root)
            self._histories.append(token)

        if self.eutil == EUtil.EGQUERY:
            term = self.get_term()
            for element in find_all(root, ".//ResultItem"):
                chunk = flatten(element)
                if term:
                    chunk["Term"] = term
                gquery = GlobalQuery(config=self.config)
                gquery._add_data(chunk)
                self._globalqueries.append(gquery)

    # ---------------- Accessors ---------------- #

    def get_ids(self) -> List[str]:
        """Return the returned ID list (esearch) in document order."""
        self._ensure_parsed()
        return find_all_text(self.dom, ".//IdList/Id")

    def get_databases(self) -> List[str]:
        """Return the databases covered by this result.

        egquery lists every queried database, espell names the database it
        checked; esearch and epost documents carry no database so the one
        given at construction is returned (if any).
        """
        self._ensure_parsed()
        if self.eutil == EUtil.ESPELL:
            database = find_text(self.dom, ".//Database")
            return [database] if database else []
        if self.eutil == EUtil.EGQUERY:
            return [gq.get_database() for gq in self._globalqueries if gq.get_database()]
        return super().get_databases()

    def get_count(self, database: Optional[str] = None) -> Optional[str]:
        """Return the hit count.

        Args:
            database: Required for egquery, where each database has its own
                count; ignored for esearch.

        Returns:
            The count, or None when not applicable or the database is unknown.
        """
        self._ensure_parsed()
        if self.eutil == EUtil.EGQUERY:
            if not database:
                logger.warning("Must specify database to get count from")
                return None
            for gquery in self._globalqueries:
                if gquery.get_database() == database:
                    return gquery.get_count()
            logger.warning(f"Unknown database {database}")
            return None
        if self.eutil == EUtil.ESEARCH:
            return find_text(self.dom, "Count")
        return None

    def get_term(self) -> Optional[str]:
        """Return the query term (egquery, espell; esearch if given at construction)."""
        self._ensure_parsed()
        if self.eutil == EUtil.ESPELL:
            return find_text(self.dom, ".//Query")
        if self.eutil == EUtil.EGQUERY:
            return find_text(self.dom, ".//Term") or self._term
        if self.eutil == EUtil.ESEARCH:
            return self._term
        return None

    def _esearch_text(self, path: str) -> Optional[str]:
        self._ensure_parsed()
        if self.eutil != EUtil.ESEARCH:
            return None
        return find_text(self.dom, path)

    def get_translation_from(self) -> Optional[str]:
        """Return the portion of the query replaced by :meth:`get_translation_to`."""
        return self._esearch_text(".//Translation/From")

    def get_translation_to(self) -> Optional[str]:
        return self._esearch_text(".//Translation/To")

    def get_retstart(self) -> Optional[str]:
        return self._esearch_text("RetStart")

    def get_retmax(self) -> Optional[str]:
        return self._esearch_text("RetMax")

    def get_query_translation(self) -> Optional[str]:
        """Return the translated query actually run by esearch."""
        return self._esearch_text("QueryTranslation")

    def get_corrected_query(self) -> Optional[str]:
        self._ensure_parsed()
        if self.eutil != EUtil.ESPELL:
            return None
        return find_text(self.dom, ".//CorrectedQuery")

    def get_replaced_terms(self) -> List[str]:
        """Return the terms espell replaced in the query."""
        self._ensure_parsed()
        if self.eutil != EUtil.ESPELL:
            return []
        return find_all_text(self.dom, ".//SpelledQuery/Replaced")

    def get_GlobalQueries(self) -> List[GlobalQuery]:
        self._ensure_parsed()
        return list(self._globalqueries)

    def next_GlobalQuery(self) -> Optional[GlobalQuery]:
        self._ensure_parsed()
        return self._next("globalqueries", self.get_GlobalQueries)

    def get_Histories(self) -> List[History]:
        self._ensure_parsed()
        return list(self._histories)

    def next_History(self) -> Optional[History]:
        self._ensure_parsed()
        return self._next("histories", self.get_Histories)

    def to_string(self) -> str:
        self._ensure_parsed()
        rows = [
            ("DB", ", ".join(self.get_databases())),
            ("Query", self.get_term() or ""),
        ]
        if self.eutil == EUtil.ESEARCH:
            rows += [
                ("Count", self.get_count() or ""),
                ("IDs", ", ".join(self.get_ids())),
                ("Translation From", self.get_translation_from() or ""),
                ("Translation To", self.get_translation_to() or ""),
                ("RetStart", self.get_retstart() or ""),
                ("RetMax", self.get_retmax() or ""),
                ("Translation", self.get_query_translation() or ""),
            ]
        elif self.eutil == EUtil.ESPELL:
            rows += [
                ("Corrected", self.get_corrected_query() or ""),
                ("Replaced", ",".join(self.get_replaced_terms())),
            ]
        else:
            rows.append(("IDs", ", ".join(self.get_ids())))
        string = "".join(self._row(label, value) for label, value in rows)
        for token in self.get_Histories():
            string += token.to_string()
        for gquery in self.get_GlobalQueries():
            string += gquery.to_string()
        return string
