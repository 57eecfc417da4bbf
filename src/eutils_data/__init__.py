"""eutils-data
===========

Typed object layer over the XML documents returned by the NCBI Entrez
E-utilities (``einfo``, ``esearch``, ``epost``, ``espell``, ``egquery``,
``elink`` and ``esummary``).

Key capabilities
----------------
- Lazy parsing: result objects parse their document on first access, exactly
  once, from raw bytes, a pre-fetched response (e.g. ``httpx.Response``), a
  stream or a file.
- Per-operation object graphs: database and field descriptions
  (:class:`~eutils_data.info.Info`), search / post / spelling / global query
  results (:class:`~eutils_data.query.Query`), classified link sets
  (:class:`~eutils_data.link.Link`) and document summaries with arbitrarily
  nested items (:class:`~eutils_data.summary.Summary`).
- Resettable ``next_X`` cursors alongside every ``get_X`` collection.
- Server history tokens (``WebEnv`` / ``QueryKey``) for chaining requests.

Design principles
-----------------
1. **No transport** – fetching documents is the caller's job; this package
    only binds XML to objects.
2. **Recoverable gaps are logged** – missing summaries, erroneous link groups
    and server warnings go to :mod:`logging`; only misconfiguration raises.
3. **Live views and records** – link descriptions and history tokens read the
    parsed tree on demand, field descriptions and global query counts are
    copied out at ingestion.

Minimal quick start
-------------------
>>> from eutils_data import load_eutil
>>> search = load_eutil("esearch", content=b"<eSearchResult><Count>2</Count>"
...                     b"<IdList><Id>1</Id><Id>2</Id></IdList></eSearchResult>")
>>> search.get_count()
'2'
>>> search.get_ids()
['1', '2']

Public surface
--------------
Only a curated subset is exported at the package level; the data classes of
each operation can be imported from their modules.
"""

__version__ = "0.1.0"

from .config import EUtil, ParserConfig
from .errors import ConfigurationError, EUtilsError
from .info import Info
from .link import Link, LinkSetKind
from .loader import load_eutil
from .query import Query
from .summary import Summary

__all__ = [
    "ConfigurationError",
    "EUtil",
    "EUtilsError",
    "Info",
    "Link",
    "LinkSetKind",
    "ParserConfig",
    "Query",
    "Summary",
    "load_eutil",
    "__version__",
]
