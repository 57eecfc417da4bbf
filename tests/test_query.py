import logging
from pathlib import Path

from eutils_data.interfaces import HistoryI
from eutils_data.query import GlobalQuery, Query

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "eutils"


def _query(eutil, name, **kwargs):
    return Query(eutil, content=(FIXTURES / name).read_bytes(), **kwargs)


def test_minimal_esearch_round_trip():
    search = Query(
        "esearch",
        content=b"<eSearchResult><Count>42</Count><IdList><Id>1</Id><Id>2</Id></IdList></eSearchResult>",
    )

    assert search.get_count() == "42"
    assert search.get_ids() == ["1", "2"]
    assert search.has_History() is False
    assert search.get_Histories() == []


def test_esearch_details():
    search = _query("esearch", "esearch.xml", database="pubmed", term="asthma")

    assert search.datatype == "esearch"
    assert search.get_retmax() == "2"
    assert search.datatype == "singledbquery"
    assert search.get_retstart() == "0"
    assert search.get_translation_from() == "asthma"
    assert search.get_translation_to() == '"asthma"[MeSH Terms] OR asthma[All Fields]'
    assert search.get_query_translation() == '"asthma"[MeSH Terms] OR asthma[All Fields]'
    assert search.get_term() == "asthma"
    assert search.get_databases() == ["pubmed"]
    assert search.get_db() == "pubmed"
    assert search.get_corrected_query() is None
    assert search.get_replaced_terms() == []


def test_esearch_with_history():
    search = _query("esearch", "esearch.xml")

    assert isinstance(search, HistoryI)
    assert search.history() == ("MCID_0123456789", "1")

    token = search.next_History()
    assert token.get_webenv() == "MCID_0123456789"
    assert token.get_query_key() == "1"
    assert token.eutil.value == "esearch"
    assert search.next_History() is None

    search.rewind("histories")
    assert search.next_History() is token


def test_epost_yields_history_token():
    post = _query("epost", "epost.xml")

    assert post.get_ids() == []
    assert post.history() == ("NCID_1_post", "1")
    assert post.datatype == "history"
    assert post.get_count() is None
    assert "WebEnv" in post.to_string()


def test_espell():
    spell = _query("espell", "espell.xml")

    assert spell.get_term() == "asthmaa OR alergies"
    assert spell.get_corrected_query() == "asthma or allergies"
    assert spell.get_replaced_terms() == ["asthma", "allergies"]
    assert spell.get_databases() == ["pubmed"]
    assert spell.datatype == "spelling"
    assert spell.get_translation_from() is None


def test_egquery_global_queries():
    gquery = _query("egquery", "egquery.xml")

    queries = gquery.get_GlobalQueries()
    assert gquery.datatype == "multidbquery"
    assert [q.get_database() for q in queries] == ["pubmed", "protein", "books"]
    assert all(q.get_term() == "mouse" for q in queries)
    assert queries[2].get_status() == "Term or Database is not found"
    assert queries[0].get_menu_name() == "PubMed"
    assert gquery.get_databases() == ["pubmed", "protein", "books"]
    assert gquery.get_term() == "mouse"


def test_egquery_count_requires_known_database(caplog):
    gquery = _query("egquery", "egquery.xml")

    assert gquery.get_count("protein") == "250"
    with caplog.at_level(logging.WARNING, logger="eutils_data"):
        assert gquery.get_count() is None
        assert gquery.get_count("taxonomy") is None

    assert "Must specify database to get count from" in caplog.text
    assert "Unknown database taxonomy" in caplog.text


def test_next_global_query_exhausts_then_rewinds():
    gquery = _query("egquery", "egquery.xml")

    seen = []
    while (item := gquery.next_GlobalQuery()) is not None:
        seen.append(item.get_database())
    assert seen == ["pubmed", "protein", "books"]
    assert gquery.next_GlobalQuery() is None

    gquery.rewind("all")
    assert gquery.next_GlobalQuery().get_database() == "pubmed"


def test_global_query_record_is_a_copy():
    gquery = GlobalQuery()
    gquery._add_data({"DbName": "pubmed", "Count": "5", "Status": "Ok"})

    assert gquery.get_count() == "5"
    assert gquery.to_string().startswith("pubmed")
    assert "Total:5" in gquery.to_string()
    assert "Status:Ok" in gquery.to_string()


def test_esearch_to_string_rows_in_order():
    text = _query("esearch", "esearch.xml", database="pubmed", term="asthma").to_string()
    labels = [line.split(":", 1)[0].strip() for line in text.splitlines() if line[:1] != " "]

    assert labels[:4] == ["DB", "Query", "Count", "IDs"]
    assert "WebEnv" in labels
