"""Base class for per-operation result objects.

A result object wraps exactly one E-utility response document. It owns the
lazy parse gate: nothing is parsed at construction, the first data-bearing
accessor (or an explicit :meth:`EUtilResult.parse` call) parses the configured
source once and runs the operation specific ingestion, and every later call is
free.

Input sources (exactly one):
        * ``content`` – raw ``bytes`` / ``str`` document
        * ``response`` – a pre-fetched response exposing ``.content``
          (e.g. ``httpx.Response``)
        * ``fh`` – a readable stream
        * ``file`` – a filesystem path

Example:
        from eutils_data.query import Query

        result = Query("esearch", content=xml_bytes)
        result.parsed          # False
        result.get_count()     # parses, then reads <Count>
        result.parsed          # True
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union

from . import dom
from .config import EUtil, ParserConfig
from .dom import Element, find_all, find_text
from .errors import ConfigurationError
from .interfaces import EUtilData

logger = logging.getLogger(__name__)

SOURCE_NAMES = ("content", "response", "fh", "file")


class EUtilResult(EUtilData):
    """Lazy-parsing container for one E-utility response document.

    Args:
        eutil: Operation kind; defaults to the first kind the subclass handles.
        content: Raw XML document.
        response: Pre-fetched response object exposing ``.content``.
        fh: Readable stream containing the XML document.
        file: Path to a saved XML document.
        database: Database the request was issued against, when known. Used
            where the document itself does not name it (esearch, esummary).
        term: Search term of the request, when known (esearch).
        config: Optional :class:`ParserConfig`.

    Raises:
        ConfigurationError: If more than one source is supplied or ``eutil`` is
            not handled by this result class.
    """

    eutils: ClassVar[Tuple[EUtil, ...]] = ()
    default_datatype: ClassVar[Optional[str]] = None

    def __init__(
        self,
        eutil: Optional[Union[str, EUtil]] = None,
        *,
        content: Optional[Union[bytes, str]] = None,
        response: Any = None,
        fh: Any = None,
        file: Optional[Union[str, Path]] = None,
        database: Optional[str] = None,
        term: Optional[str] = None,
        config: Optional[ParserConfig] = None,
    ) -> None:
        if eutil is None and self.eutils:
            eutil = self.eutils[0]
        super().__init__(
            eutil=eutil,
            datatype=self.default_datatype or (EUtil.coerce(eutil).value if eutil else None),
            config=config,
        )
        sources = {
            name: value
            for name, value in zip(SOURCE_NAMES, (content, response, fh, file))
            if value is not None
        }
        if len(sources) > 1:
            raise ConfigurationError(
                f"Only one input source may be configured, got: {', '.join(sources)}"
            )
        self._source: Dict[str, Any] = sources
        self._database = database
        self._term = term
        self._parsed = False
        self._datatype_refined = False
        self.dom: Optional[Element] = None

    @EUtilData.eutil.setter
    def eutil(self, value: Union[str, EUtil]) -> None:
        kind = EUtil.coerce(value)
        if self.eutils and kind not in self.eutils:
            supported = ", ".join(k.value for k in self.eutils)
            raise ConfigurationError(
                f"{type(self).__name__} handles {supported}, not {kind.value}"
            )
        if getattr(self, "_parsed", False) and kind is not self._eutil:
            raise ConfigurationError(
                f"Cannot change eutil to {kind.value} after the document was parsed"
            )
        self._eutil = kind

    # ---------------- Lazy parse gate ---------------- #

    @property
    def parsed(self) -> bool:
        return self._parsed

    def parse(self) -> None:
        """Parse the configured source and ingest it; later calls do nothing.

        Raises:
            ConfigurationError: If no input source is configured.
            xml.etree.ElementTree.ParseError: If the document is malformed.
        """
        if self._parsed:
            return
        if not self._source:
            raise ConfigurationError("No response or stream specified")
        kind, value = next(iter(self._source.items()))
        if kind == "file":
            with open(value, "rb") as handle:
                root = dom.parse_document(handle)
        elif kind == "response":
            root = dom.parse_document(value.content)
        else:
            root = dom.parse_document(value)

        self.dom = root
        self.node = root
        self._parsed = True
        if not self.config.keep_response:
            self._source = {}
        if self.config.warn_on_server_messages:
            self._report_server_messages(root)
        self._ingest(root)

    def _ensure_parsed(self) -> None:
        self.parse()

    def _ingest(self, root: Element) -> None:
        """Build the object graph for this operation kind from ``root``."""
        raise NotImplementedError(f"{type(self).__name__} does not implement _ingest")

    def _add_data(self, chunk: Any) -> None:
        """Ingest an already parsed document root; a no-op once parsed."""
        if self._parsed:
            return
        self.dom = chunk
        self.node = chunk
        self._parsed = True
        self._ingest(chunk)

    def _refine_datatype(self, datatype: str) -> None:
        """Apply the single permitted refinement of :attr:`datatype`."""
        if self._datatype_refined:
            logger.debug(
                f"Ignoring datatype refinement to {datatype}; already {self.datatype}"
            )
            return
        self.datatype = datatype
        self._datatype_refined = True

    def _report_server_messages(self, root: Element) -> None:
        eutil = self.eutil.value if self.eutil else "eutil"
        error = find_text(root, "ERROR")
        if error:
            logger.warning(f"NCBI {eutil} error: {error.strip()}")
        for container, label in (("ErrorList", "Error"), ("WarningList", "Warning")):
            for message in find_all(root, f"{container}/*"):
                text = dom.text_of(message) or ""
                logger.warning(f"NCBI {eutil} {label}: {message.tag} [{text.strip()}]")

    # ---------------- Shared accessors ---------------- #

    def get_databases(self) -> List[str]:
        """Return the databases this result refers to (may be empty)."""
        self._ensure_parsed()
        return [self._database] if self._database else []

    def get_database(self) -> Optional[str]:
        """Return the single (first) database, or None."""
        databases = self.get_databases()
        return databases[0] if databases else None

    def get_db(self) -> Optional[str]:
        return self.get_database()

    def _rewind_children(self) -> List[EUtilData]:
        return []
