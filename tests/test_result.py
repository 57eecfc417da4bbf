import io
import logging
import xml.etree.ElementTree as ET
from pathlib import Path

import httpx
import pytest

import eutils_data.dom
from eutils_data.config import EUtil, ParserConfig
from eutils_data.errors import ConfigurationError
from eutils_data.history import History
from eutils_data.interfaces import EUtilData
from eutils_data.query import Query
from eutils_data.result import EUtilResult

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "eutils"
ESEARCH = (FIXTURES / "esearch.xml").read_bytes()


def test_nothing_is_parsed_until_first_access():
    search = Query("esearch", content=ESEARCH)

    assert search.parsed is False
    assert search.dom is None

    assert search.get_count() == "42"
    assert search.parsed is True
    assert search.dom is not None


def test_document_is_parsed_exactly_once(monkeypatch):
    calls = []
    original = eutils_data.dom.parse_document

    def spy(source):
        calls.append(source)
        return original(source)

    monkeypatch.setattr(eutils_data.dom, "parse_document", spy)

    search = Query("esearch", content=ESEARCH)
    search.parse()
    search.get_count()
    search.get_ids()
    search.history()
    search.parse()
    search.to_string()

    assert len(calls) == 1
    assert len(search.get_Histories()) == 1


def test_accepts_httpx_response():
    response = httpx.Response(200, content=ESEARCH)

    search = Query("esearch", response=response)

    assert search.get_ids() == ["1", "2"]


def test_accepts_stream_and_file():
    from_stream = Query("esearch", fh=io.BytesIO(ESEARCH))
    from_file = Query("esearch", file=FIXTURES / "esearch.xml")

    assert from_stream.get_count() == "42"
    assert from_file.get_count() == "42"


def test_accepts_text_content():
    search = Query("esearch", content="<eSearchResult><Count>3</Count></eSearchResult>")

    assert search.get_count() == "3"


def test_missing_source_raises_on_parse():
    search = Query("esearch")

    with pytest.raises(ConfigurationError, match="No response or stream specified"):
        search.get_ids()
    assert search.parsed is False


def test_multiple_sources_rejected():
    with pytest.raises(ConfigurationError, match="Only one input source"):
        Query("esearch", content=ESEARCH, fh=io.BytesIO(ESEARCH))


def test_unknown_eutil_rejected():
    with pytest.raises(ConfigurationError, match="efetch not supported"):
        Query("efetch", content=ESEARCH)


def test_eutil_must_belong_to_result_class():
    with pytest.raises(ConfigurationError, match="not elink"):
        Query("elink", content=ESEARCH)


def test_eutil_defaults_to_first_handled_kind():
    assert Query(content=ESEARCH).eutil is EUtil.ESEARCH


def test_configuration_error_is_value_error():
    with pytest.raises(ValueError):
        EUtil.coerce("efetch")


def test_malformed_document_propagates_and_stays_unparsed():
    search = Query("esearch", content=b"<eSearchResult><Count>1</Count>")

    with pytest.raises(ET.ParseError):
        search.parse()
    assert search.parsed is False


def test_source_released_when_not_kept():
    search = Query("esearch", content=ESEARCH, config=ParserConfig(keep_response=False))
    search.parse()

    assert search.parsed is True
    assert search.get_count() == "42"
    assert search._source == {}


def test_server_error_and_warnings_are_logged(caplog):
    document = (
        b"<eSearchResult><ERROR>Invalid db name specified: pubmd</ERROR>"
        b"<WarningList><OutputMessage>No items found.</OutputMessage></WarningList>"
        b"<ErrorList><PhraseNotFound>zzzz</PhraseNotFound></ErrorList>"
        b"</eSearchResult>"
    )
    search = Query("esearch", content=document)

    with caplog.at_level(logging.WARNING, logger="eutils_data"):
        assert search.get_ids() == []

    messages = [record.getMessage() for record in caplog.records]
    assert "NCBI esearch error: Invalid db name specified: pubmd" in messages
    assert "NCBI esearch Warning: OutputMessage [No items found.]" in messages
    assert "NCBI esearch Error: PhraseNotFound [zzzz]" in messages


def test_server_messages_can_be_silenced(caplog):
    document = b"<eSearchResult><ERROR>bad</ERROR></eSearchResult>"
    config = ParserConfig(warn_on_server_messages=False)

    with caplog.at_level(logging.WARNING, logger="eutils_data"):
        Query("esearch", content=document, config=config).parse()

    assert caplog.records == []


def test_datatype_refined_once():
    search = Query("esearch", content=ESEARCH)
    assert search.datatype == "esearch"

    search.parse()
    assert search.datatype == "singledbquery"

    search._refine_datatype("multidbquery")
    assert search.datatype == "singledbquery"


def test_interface_methods_are_abstract():
    data = EUtilData(eutil="esearch")

    with pytest.raises(NotImplementedError):
        data._add_data({})
    with pytest.raises(NotImplementedError):
        data.to_string()
    with pytest.raises(NotImplementedError):
        str(data)

    with pytest.raises(NotImplementedError):
        EUtilResult(content=ESEARCH).parse()


def test_eutil_assignment_is_validated():
    data = EUtilData()
    data.eutil = "ELINK"
    assert data.eutil is EUtil.ELINK

    with pytest.raises(ConfigurationError):
        data.eutil = "efetch"


def test_history_token_is_a_live_view():
    token = History()
    token._add_data(ET.fromstring("<r><WebEnv>W</WebEnv><QueryKey>7</QueryKey></r>"))

    assert token.history() == ("W", "7")
    assert token.has_History() is True
    assert "Query Key" in token.to_string()


def test_ingesting_after_parse_is_a_no_op():
    search = Query("esearch", content=ESEARCH)
    search.parse()

    search._add_data(eutils_data.dom.parse_document(ESEARCH))

    assert len(search.get_Histories()) == 1
    assert search.get_ids() == ["1", "2"]


def test_ingesting_twice_builds_the_graph_once():
    search = Query("esearch")
    root = eutils_data.dom.parse_document(ESEARCH)

    search._add_data(root)
    search._add_data(root)

    assert search.parsed is True
    assert len(search.get_Histories()) == 1


def test_eutil_reassignment_is_checked_against_result_class():
    search = Query("esearch", content=ESEARCH)

    search.eutil = "egquery"
    assert search.eutil is EUtil.EGQUERY

    with pytest.raises(ConfigurationError, match="not einfo"):
        search.eutil = "einfo"
    assert search.eutil is EUtil.EGQUERY


def test_eutil_is_fixed_once_parsed():
    search = Query("esearch", content=ESEARCH)
    search.parse()

    with pytest.raises(ConfigurationError, match="after the document was parsed"):
        search.eutil = "espell"
    search.eutil = "esearch"
    assert search.eutil is EUtil.ESEARCH
    assert search.get_count() == "42"
