from azure.search.documents.models import AutocompleteItem

from conftest import FakeIndexClient, FakeSearchClient
from search_howto import autocomplete


def test_index_has_suggester():
    client = FakeIndexClient()

    index = autocomplete.create_hotels_index(client)

    suggester = index.suggesters[0]
    assert suggester.name == "sg"
    assert suggester.source_fields == ["hotelName", "description"]


def test_write_autocomplete_results(capsys):
    autocomplete.write_autocomplete_results([AutocompleteItem({"text": "hotel", "queryPlusText": "best hotel"})])
    autocomplete.write_autocomplete_results([])

    assert capsys.readouterr().out == "text: hotel queryPlusText: best hotel\n\nno text matched\n\n"


def test_run_autocomplete_queries(capsys):
    client = FakeSearchClient(completions=[{"text": "hostel", "queryPlusText": "best hostel"}])

    autocomplete.run_autocomplete_queries(client)

    calls = client.autocomplete_calls
    assert [c["mode"] for c in calls] == ["oneTerm", "oneTermWithContext", "twoTerms", "oneTerm"]
    assert [c["use_fuzzy_matching"] for c in calls] == [False, False, False, True]
    assert calls[3]["search_text"] == "best hostel"
    assert all(c["suggester_name"] == "sg" for c in calls)
    assert capsys.readouterr().out.count("queryPlusText: best hostel") == 4
