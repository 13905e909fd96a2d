"""
Autocomplete how-to.

Creates a ``hotels`` index with a suggester named ``sg`` over ``hotelName``
and ``description``, then asks the service to complete the partial query
"best ho" in each autocomplete mode, and once more with fuzzy matching.

Usage:
    python -m search_howto.autocomplete
"""

from typing import List

from azure.search.documents import SearchClient
from azure.search.documents.models import AutocompleteItem
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import SearchIndex, SearchSuggester

from .clients import get_index_client, get_search_client
from .config import ConfigurationError, exit_on_configuration_error, load_settings
from .documents import delete_index_if_exists, upload_documents
from .hotels import HOTELS_INDEX_NAME, hotel_fields, sample_autocomplete_hotels

SUGGESTER_NAME = "sg"
SUGGESTER_FIELDS = ["hotelName", "description"]


def create_hotels_index(index_client: SearchIndexClient) -> SearchIndex:
    definition = SearchIndex(
        name=HOTELS_INDEX_NAME,
        fields=hotel_fields(),
        suggesters=[SearchSuggester(name=SUGGESTER_NAME, source_fields=SUGGESTER_FIELDS)],
    )
    return index_client.create_index(definition)


def write_autocomplete_results(results: List[AutocompleteItem]) -> None:
    if results:
        for item in results:
            print(f"text: {item.text} queryPlusText: {item.query_plus_text}")
    else:
        print("no text matched")
    print()


def autocomplete(
    search_client: SearchClient,
    text: str,
    mode: str,
    fuzzy: bool = False,
) -> List[AutocompleteItem]:
    return search_client.autocomplete(
        search_text=text,
        suggester_name=SUGGESTER_NAME,
        mode=mode,
        use_fuzzy_matching=fuzzy,
        search_fields=SUGGESTER_FIELDS,
    )


def run_autocomplete_queries(search_client: SearchClient) -> None:
    print("Autocomplete query with oneTerm mode:\n")
    write_autocomplete_results(autocomplete(search_client, "best ho", "oneTerm"))

    print("Autocomplete with oneTermWithContext mode:\n")
    write_autocomplete_results(autocomplete(search_client, "best ho", "oneTermWithContext"))

    print("Autocomplete with twoTerms mode:\n")
    write_autocomplete_results(autocomplete(search_client, "best ho", "twoTerms"))

    print("Autocomplete with oneTerm mode with fuzzy enabled:\n")
    write_autocomplete_results(autocomplete(search_client, "best hostel", "oneTerm", fuzzy=True))


def main() -> None:
    try:
        settings = load_settings()
        index_client = get_index_client(settings)
        admin_search_client = get_search_client(settings, HOTELS_INDEX_NAME, use_query_key=False)
        query_client = get_search_client(settings, HOTELS_INDEX_NAME)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    print("Cleaning up resources...\n")
    delete_index_if_exists(index_client, HOTELS_INDEX_NAME)

    print("Creating index...\n")
    create_hotels_index(index_client)

    print("Uploading documents...\n")
    upload_documents(admin_search_client, [h.to_document() for h in sample_autocomplete_hotels()])

    print("Running autocomplete queries...\n")
    run_autocomplete_queries(query_client)

    print("Complete.\n")


if __name__ == "__main__":
    main()
