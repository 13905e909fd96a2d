"""
Synonyms how-to.

Queries for terms that never appear in the documents ("five star",
"economy", "internet") return nothing until a synonym map is uploaded and
attached to the ``category`` and ``tags`` fields. The expansion itself is
done by the service at query time.

Usage:
    python -m search_howto.synonyms
"""

import time
from typing import Callable, List, Optional

from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import (
    SearchIndex,
    SearchResourceEncryptionKey,
    SynonymMap,
)

from .clients import get_index_client, get_search_client
from .config import ConfigurationError, exit_on_configuration_error, load_settings
from .documents import (
    delete_index_if_exists,
    delete_synonym_map_if_exists,
    upload_documents,
    write_documents,
)
from .hotels import HOTELS_INDEX_NAME, SYNONYM_MAP_NAME, hotel_fields, sample_hotels

# Solr format: comma lists are equivalent, "=>" maps one way
SYNONYM_RULES = [
    "hotel, motel",
    "internet,wifi",
    "five star=>luxury",
    "economy,inexpensive=>budget",
]

SYNONYM_FIELDS = ("category", "tags")

# Seconds for index changes to propagate
PROPAGATION_DELAY = 10.0

NO_MATCH = "no document matched"


def cleanup_resources(index_client: SearchIndexClient) -> None:
    delete_index_if_exists(index_client, HOTELS_INDEX_NAME)
    delete_synonym_map_if_exists(index_client, SYNONYM_MAP_NAME)


def create_hotels_index(
    index_client: SearchIndexClient,
    encryption_key: Optional[SearchResourceEncryptionKey] = None,
) -> SearchIndex:
    definition = SearchIndex(
        name=HOTELS_INDEX_NAME,
        fields=hotel_fields(),
        encryption_key=encryption_key,
    )
    return index_client.create_index(definition)


def upload_synonyms(
    index_client: SearchIndexClient,
    encryption_key: Optional[SearchResourceEncryptionKey] = None,
) -> SynonymMap:
    synonym_map = SynonymMap(
        name=SYNONYM_MAP_NAME,
        synonyms=list(SYNONYM_RULES),
        encryption_key=encryption_key,
    )
    return index_client.create_or_update_synonym_map(synonym_map)


def enable_synonyms_in_hotels_index(index_client: SearchIndexClient) -> SearchIndex:
    """Attach the synonym map to the category and tags fields."""
    index = index_client.get_index(HOTELS_INDEX_NAME)
    for field in index.fields:
        if field.name in SYNONYM_FIELDS:
            field.synonym_map_names = [SYNONYM_MAP_NAME]
    return index_client.create_or_update_index(index)


def run_queries(search_client: SearchClient) -> None:
    print("Search the entire index for the term 'budget' and return only the hotelName field:\n")
    write_documents(search_client.search(search_text="budget", select=["hotelName"]), NO_MATCH)

    print("Apply a filter to the index to find hotels cheaper than $150 per night, "
          "and return the hotelId and description:\n")
    write_documents(
        search_client.search(search_text="*", filter="baseRate lt 150", select=["hotelId", "description"]),
        NO_MATCH,
    )

    print("Search the entire index, order by a specific field (lastRenovationDate) "
          "in descending order, take the top two results, and show only hotelName and "
          "lastRenovationDate:\n")
    write_documents(
        search_client.search(
            search_text="*",
            order_by=["lastRenovationDate desc"],
            select=["hotelName", "lastRenovationDate"],
            top=2,
        ),
        NO_MATCH,
    )

    print("Search the entire index for the term 'motel':\n")
    write_documents(search_client.search(search_text="motel"), NO_MATCH)


def run_queries_with_nonexistent_terms(
    search_client: SearchClient,
    queries: Optional[List[str]] = None,
) -> None:
    """Search the synonym-enabled fields for terms that only synonyms can match."""
    queries = queries or ['"five star"', "economy hotel", "internet"]

    print("Search with terms nonexistent in the index:\n")
    for query in queries:
        print(f"Search the entire index for {query}:\n")
        results = search_client.search(
            search_text=query,
            search_fields=list(SYNONYM_FIELDS),
            select=["hotelName", "category", "tags"],
        )
        write_documents(results, NO_MATCH)


def run_synonyms_demo(
    index_client: SearchIndexClient,
    admin_search_client: SearchClient,
    query_client: SearchClient,
    sleep: Optional[Callable[[float], None]] = None,
) -> None:
    print("Deleting index...\n")
    cleanup_resources(index_client)

    print("Creating index...\n")
    create_hotels_index(index_client)

    print("Uploading documents...\n")
    upload_documents(admin_search_client, [h.to_document() for h in sample_hotels()], sleep=sleep)

    run_queries(query_client)
    run_queries_with_nonexistent_terms(query_client)

    print("Adding synonyms...\n")
    upload_synonyms(index_client)
    enable_synonyms_in_hotels_index(index_client)
    (sleep or time.sleep)(PROPAGATION_DELAY)

    run_queries_with_nonexistent_terms(query_client)


def main() -> None:
    try:
        settings = load_settings()
        index_client = get_index_client(settings)
        admin_search_client = get_search_client(settings, HOTELS_INDEX_NAME, use_query_key=False)
        query_client = get_search_client(settings, HOTELS_INDEX_NAME)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    run_synonyms_demo(index_client, admin_search_client, query_client)
    print("Complete.\n")


if __name__ == "__main__":
    main()
