"""Operation kind to result class table.

:func:`load_eutil` is the single entry point for callers that only know which
E-utility produced a document. The table is keyed by :class:`EUtil` and is
checked at import time to cover every member, so adding an operation kind
without a result class fails loudly.

Example:
        from eutils_data.loader import load_eutil

        result = load_eutil("esearch", response=httpx_response)
        result.get_ids()
"""

from __future__ import annotations

from typing import Dict, Type, Union

from .config import EUtil
from .info import Info
from .link import Link
from .query import Query
from .result import EUtilResult
from .summary import Summary

RESULT_CLASSES: Dict[EUtil, Type[EUtilResult]] = {
    EUtil.EINFO: Info,
    EUtil.ESEARCH: Query,
    EUtil.EPOST: Query,
    EUtil.ESPELL: Query,
    EUtil.EGQUERY: Query,
    EUtil.ELINK: Link,
    EUtil.ESUMMARY: Summary,
}

_missing = [kind.value for kind in EUtil if kind not in RESULT_CLASSES]
if _missing:
    raise RuntimeError(f"No result class registered for: {', '.join(_missing)}")


def result_class_for(eutil: Union[str, EUtil]) -> Type[EUtilResult]:
    """Return the result class handling ``eutil``.

    Raises:
        ConfigurationError: If ``eutil`` is not a recognized operation kind.
    """
    return RESULT_CLASSES[EUtil.coerce(eutil)]


def load_eutil(eutil: Union[str, EUtil], **source) -> EUtilResult:
    """Build an unparsed result object for one E-utility document.

    Args:
        eutil: Operation kind that produced the document.
        **source: Keyword arguments forwarded to the result class: exactly one
            of ``content``, ``response``, ``fh`` or ``file``, plus the optional
            ``database``, ``term`` and ``config``.

    Returns:
        An :class:`~eutils_data.result.EUtilResult` subclass instance. Nothing
        is parsed until the first accessor call.

    Raises:
        ConfigurationError: For unknown operation kinds or conflicting sources.
    """
    kind = EUtil.coerce(eutil)
    return RESULT_CLASSES[kind](kind, **source)
