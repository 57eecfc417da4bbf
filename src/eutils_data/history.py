"""Standalone server history token.

epost always answers with a history token, and esearch does when history was
requested. Either way the token is a live view over the response document:
``WebEnv`` and ``QueryKey`` are re-read from the DOM on every access.
"""

from __future__ import annotations

from typing import Any, Optional, Union

from .config import EUtil, ParserConfig
from .interfaces import HistoryI


class History(HistoryI):
    """``(WebEnv, QueryKey)`` pair backed by a DOM fragment."""

    def __init__(
        self,
        eutil: Optional[Union[str, EUtil]] = EUtil.EPOST,
        config: Optional[ParserConfig] = None,
    ) -> None:
        super().__init__(eutil=eutil, datatype="history", config=config)

    def _add_data(self, chunk: Any) -> None:
        self.node = chunk

    def to_string(self) -> str:
        webenv, query_key = self.history()
        string = ""
        if webenv:
            string += self._row("WebEnv", webenv)
        if query_key:
            string += self._row("Query Key", query_key)
        return string
