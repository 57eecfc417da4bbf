import logging
from pathlib import Path

from eutils_data.summary import DocSum, Item, ListItem, StructureItem, Summary

FIXTURES = Path(__file__).resolve().parent / "fixtures" / "eutils"

SCENARIO = (
    b"<eSummaryResult><DocSum><Id>7</Id>"
    b'<Item Name="CreateDate" Type="String">2020-01-01</Item>'
    b'<Item Name="Authors" Type="List">'
    b'<Item Name="Author" Type="Structure"><Item Name="Name" Type="String">A</Item></Item>'
    b'<Item Name="Author" Type="Structure"><Item Name="Name" Type="String">B</Item></Item>'
    b"</Item>"
    b"</DocSum></eSummaryResult>"
)


def _summary():
    return Summary(content=(FIXTURES / "esummary.xml").read_bytes(), database="pubmed")


def _names(items):
    return [item.get_name() for item in items]


def test_flattened_items_in_document_order():
    document = (
        b"<eSummaryResult><DocSum><Id>7</Id>"
        b'<Item Name="CreateDate" Type="String">2020-01-01</Item>'
        b'<Item Name="Authors" Type="List">'
        b'<Item Name="First" Type="Structure"></Item>'
        b'<Item Name="Second" Type="Structure"></Item>'
        b"</Item>"
        b"</DocSum></eSummaryResult>"
    )
    docsum = Summary(content=document).next_DocSum()

    items = docsum.get_all_Items()
    assert _names(items) == ["CreateDate", "Authors", "First", "Second"]
    assert items[0].get_type() == "String"
    assert items[0].get_content() == "2020-01-01"
    assert items[1].get_content() is None
    assert isinstance(items[2], ListItem)


def test_nested_items_follow_parent_before_next_top_level_item():
    docsum = _summary().get_DocSums()[0]

    assert _names(docsum.get_Items()) == [
        "PubDate", "AuthorList", "Title", "History", "PmcRefCount",
    ]
    assert _names(docsum.get_all_Items()) == [
        "PubDate",
        "AuthorList", "Author", "Author",
        "Title",
        "History", "PubMedPubDate", "PubStatus", "Date",
        "PmcRefCount",
    ]


def test_child_classes_follow_parent_type_at_any_depth():
    docsum = _summary().get_DocSums()[1]

    datatypes = [item.datatype for item in docsum.get_all_Items()]
    assert datatypes == ["item", "item", "structureitem", "listitem"]

    meta = docsum.get_Items()[1]
    assert [type(item) for item in meta.get_StructureItems()] == [StructureItem]
    assert meta.get_ListItems() == []
    tags = meta.get_StructureItems()[0]
    assert tags.get_type() == "List"
    assert _names(tags.get_ListItems()) == ["Tag"]
    assert tags.get_ListItems()[0].get_id() == "19880849"


def test_get_all_items_is_memoized():
    docsum = _summary().get_DocSums()[0]

    first = docsum.get_all_Items()
    second = docsum.get_all_Items()

    assert first == second
    assert all(a is b for a, b in zip(first, second))


def test_next_item_exhausts_once_and_rewinds():
    docsum = Summary(content=SCENARIO).next_DocSum()

    seen = []
    while (item := docsum.next_Item()) is not None:
        seen.append(item.get_name())
    assert seen == ["CreateDate", "Authors"]
    assert docsum.next_Item() is None
    assert docsum.next_Item("flatten") is None

    docsum.rewind("linksets")
    assert docsum.next_Item() is None

    docsum.rewind("items")
    flattened = []
    while (item := docsum.next_Item("flatten")) is not None:
        flattened.append(item.get_name())
    assert flattened == ["CreateDate", "Authors", "Author", "Name", "Author", "Name"]


def test_name_lookups():
    docsum = _summary().get_DocSums()[0]

    assert docsum.get_contents_by_name("Author") == ["Smith J", "Jones K"]
    assert docsum.get_contents_by_name("NoSuchName") == []
    assert docsum.get_contents_by_name(None) == []
    assert docsum.get_Items_by_name("NoSuchName") == []
    assert docsum.get_type_by_name("PmcRefCount") == "Integer"
    assert docsum.get_type_by_name("NoSuchName") is None
    assert docsum.get_all_names() == [
        "PubDate", "AuthorList", "Author", "Title", "History",
        "PubMedPubDate", "PubStatus", "Date", "PmcRefCount",
    ]


def test_items_are_containers_too():
    history = _summary().get_DocSums()[0].get_Items_by_name("History")[0]

    assert history.get_contents_by_name("PubStatus") == ["received"]
    assert _names(history.get_all_Items()) == ["PubMedPubDate", "PubStatus", "Date"]
    assert history.next_ListItem().get_name() == "PubMedPubDate"
    assert history.next_ListItem() is None
    assert history.get_ListItems()[0].get_contents_by_name("NoSuchName") == []


def test_items_carry_docsum_id():
    docsum = _summary().get_DocSums()[0]

    assert {item.get_id() for item in docsum.get_all_Items()} == {"19880848"}


def test_summary_ids_and_databases():
    summary = _summary()

    assert summary.get_ids() == ["19880848", "19880849"]
    assert summary.get_databases() == ["pubmed"]
    assert summary.datatype == "esummary"


def test_next_docsum_and_recursive_rewind():
    summary = _summary()

    first = summary.next_DocSum()
    assert summary.next_DocSum().get_id() == "19880849"
    assert summary.next_DocSum() is None
    assert first.next_Item().get_name() == "PubDate"

    summary.rewind("docsums")
    assert summary.next_DocSum() is first
    assert first.next_Item().get_name() == "AuthorList"

    summary.rewind("recursive")
    assert summary.next_DocSum() is first
    assert first.next_Item().get_name() == "PubDate"


def test_missing_docsums_warn(caplog):
    summary = Summary(content=b"<eSummaryResult/>")

    with caplog.at_level(logging.WARNING, logger="eutils_data"):
        assert summary.get_DocSums() == []

    assert "No returned docsums." in caplog.text


def test_to_string_nests_items():
    text = _summary().get_DocSums()[0].to_string()
    lines = text.splitlines()

    assert lines[0].startswith("UID")
    assert "19880848" in lines[0]
    assert any(line.startswith("  PubDate") for line in lines)
    assert any(line.startswith("    Author ") for line in lines)
    assert any(line.startswith("      PubStatus") for line in lines)


def test_docsum_standalone():
    from eutils_data.dom import parse_document

    docsum = DocSum()
    docsum._add_data(parse_document(b"<DocSum><Id> 5 </Id><Item Name='X' Type='String'>y</Item></DocSum>"))

    assert docsum.get_ids() == ["5"]
    assert isinstance(docsum.get_Items()[0], Item)
    assert docsum.get_Items()[0].get_id() == "5"
