from azure.core.exceptions import HttpResponseError

from conftest import FakeSearchClient
from search_howto.web_search import (
    FeaturesSearch,
    agency_facets,
    autocomplete,
    display_html,
    suggest,
    suggest_and_autocomplete,
)


def test_features_search_blank_query_matches_everything():
    client = FakeSearchClient(results=[{"FEATURE_NAME": "Mount Rainier"}])

    results = FeaturesSearch(client).search("  ")

    assert results == [{"FEATURE_NAME": "Mount Rainier"}]
    assert client.searches[0]["search_text"] == "*"
    assert client.searches[0]["search_mode"] == "all"


def test_features_search_records_errors(capsys):
    client = FakeSearchClient()
    client.error = HttpResponseError(message="Invalid expression")
    features = FeaturesSearch(client)

    assert features.search("lake") is None
    assert features.error_message == "Invalid expression"
    assert "Error querying index: Invalid expression" in capsys.readouterr().out


def test_suggest_options():
    client = FakeSearchClient(suggestions=[{"@search.text": "Programmer Analyst", "id": "1"}])

    assert suggest(client, "prog") == ["Programmer Analyst"]
    suggest(client, "prog", highlights=True, fuzzy=True)

    plain, highlighted = client.suggest_calls
    assert plain["suggester_name"] == "sg"
    assert plain["top"] == 5
    assert "highlight_pre_tag" not in plain
    assert highlighted["highlight_pre_tag"] == "<b>"
    assert highlighted["highlight_post_tag"] == "</b>"
    assert highlighted["use_fuzzy_matching"] is True


def test_autocomplete_options():
    client = FakeSearchClient(completions=[{"text": "assistant", "queryPlusText": "assistant"}])

    assert autocomplete(client, "assis") == ["assistant"]
    call = client.autocomplete_calls[0]
    assert call["mode"] == "oneTermWithContext"
    assert call["minimum_coverage"] == 80


def test_suggest_and_autocomplete_puts_completions_first():
    client = FakeSearchClient(
        suggestions=[{"@search.text": "Assistant Civil Engineer"}],
        completions=[{"text": "assistant", "queryPlusText": "assistant"}],
    )

    assert suggest_and_autocomplete(client, "assis") == [
        {"label": "assistant", "category": "Autocomplete"},
        {"label": "Assistant Civil Engineer", "category": "Suggestions"},
    ]


def test_agency_facets():
    client = FakeSearchClient(facets={"agency": [{"value": "DEPT OF PARKS", "count": 3}, {"value": "NYPD", "count": 1}]})

    assert agency_facets(client) == ["DEPT OF PARKS", "NYPD"]
    assert client.searches[0]["facets"] == ["agency,count:500"]


def test_agency_facets_without_results():
    assert agency_facets(FakeSearchClient()) == []


def test_display_html_escapes_index_text():
    assert display_html('<img src=x onerror="alert(1)">Clerk') == "&lt;img src=x onerror=&quot;alert(1)&quot;&gt;Clerk"
    assert display_html("<b>Prog</b>rammer") == "&lt;b&gt;Prog&lt;/b&gt;rammer"


def test_display_html_keeps_highlight_tags():
    assert display_html("<b>Prog</b>rammer & <i>Analyst</i>", highlighted=True) == (
        "<b>Prog</b>rammer &amp; &lt;i&gt;Analyst&lt;/i&gt;"
    )
