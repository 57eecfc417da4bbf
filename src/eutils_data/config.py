"""Operation kinds and parser configuration.

The E-utilities family is a closed set of seven operations. Every data object
in this package is tagged with one of them (see :class:`EUtil`) and every
result object may be tuned with a :class:`ParserConfig`.

Example:
        from eutils_data.config import EUtil, ParserConfig

        EUtil.coerce("esearch")          # EUtil.ESEARCH
        config = ParserConfig(wrap_width=100, keep_response=False)
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import ConfigurationError


class EUtil(str, Enum):
    """Enumeration of the recognized E-utility operation kinds."""

    ESEARCH = "esearch"
    EPOST = "epost"
    ESPELL = "espell"
    EGQUERY = "egquery"
    ELINK = "elink"
    EINFO = "einfo"
    ESUMMARY = "esummary"

    @classmethod
    def coerce(cls, value: Union[str, "EUtil"]) -> "EUtil":
        """Return the member matching ``value``.

        Args:
            value: Member or its string value (case-insensitive).

        Raises:
            ConfigurationError: If ``value`` is not a recognized operation kind.
        """
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ConfigurationError(f"{value} not supported") from None


@dataclass
class ParserConfig:
    """Configuration for parsing and rendering behavior.

    Args:
        wrap_width: Column at which ``to_string`` output is wrapped.
        label_width: Width of the padded label column in ``to_string`` output.
        keep_response: When False the raw source (bytes, response or stream)
            is released once the document has been parsed.
        warn_on_server_messages: Log server supplied ``ERROR``,
            ``ErrorList`` and ``WarningList`` content as warnings.
    """

    wrap_width: int = 80
    label_width: int = 20
    keep_response: bool = True
    warn_on_server_messages: bool = True
