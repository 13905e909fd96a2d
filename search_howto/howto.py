"""
Basic how-to: delete, create, upload documents and query an index.

Steps:
1. Delete the ``hotels`` index if it exists
2. Create it from the hotel schema (with nested address and rooms)
3. Upload the sample hotels, either as a plain upload or as a mixed batch
   (upload, merge-or-upload and delete actions)
4. Run a handful of queries with the query key and print the results

Usage:
    python -m search_howto.howto [--mixed-batch]
"""

import sys
from typing import List, Optional

from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import SearchIndex

from .clients import get_index_client, get_search_client
from .config import ConfigurationError, exit_on_configuration_error, load_settings
from .documents import delete_index_if_exists, index_batch, upload_documents, write_documents
from .hotels import HOTELS_INDEX_NAME, hotel_fields, sample_hotels_with_rooms


def create_hotels_index(index_client: SearchIndexClient) -> SearchIndex:
    definition = SearchIndex(name=HOTELS_INDEX_NAME, fields=hotel_fields(include_rooms=True))
    return index_client.create_index(definition)


def upload_hotels(search_client: SearchClient, mixed_batch: bool = False, **kwargs) -> List[str]:
    """
    Upload the sample hotels.

    With ``mixed_batch`` the third hotel is sent as merge-or-upload and a
    delete for hotel 6 is added; deleting a missing key is not an error.
    """
    docs = [hotel.to_document() for hotel in sample_hotels_with_rooms()]
    if not mixed_batch:
        return upload_documents(search_client, docs, **kwargs)
    return index_batch(
        search_client,
        upload=docs[:2],
        merge_or_upload=docs[2:],
        delete=[{"hotelId": "6"}],
        **kwargs,
    )


def run_queries(search_client: SearchClient) -> None:
    print("Search the entire index for the term 'budget' and return only the hotelName field:\n")
    results = search_client.search(search_text="budget", select=["hotelName"])
    write_documents(results)

    print("Apply a filter to the index to find hotels with rooms cheaper than $150 per night, "
          "and return the hotelId and description:\n")
    results = search_client.search(
        search_text="*",
        filter="rooms/any(r: r/baseRate lt 150)",
        select=["hotelId", "description"],
    )
    write_documents(results)

    print("Search the entire index, order by a specific field (lastRenovationDate) "
          "in descending order, take the top two results, and show only hotelName and "
          "lastRenovationDate:\n")
    results = search_client.search(
        search_text="*",
        order_by=["lastRenovationDate desc"],
        select=["hotelName", "lastRenovationDate"],
        top=2,
    )
    write_documents(results)

    print("Search the entire index for the term 'motel':\n")
    results = search_client.search(search_text="motel")
    write_documents(results)


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = load_settings()
        index_client = get_index_client(settings)
        admin_search_client = get_search_client(settings, HOTELS_INDEX_NAME, use_query_key=False)
        query_client = get_search_client(settings, HOTELS_INDEX_NAME)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    print("Deleting index...\n")
    delete_index_if_exists(index_client, HOTELS_INDEX_NAME)

    print("Creating index...\n")
    create_hotels_index(index_client)

    print("Uploading documents...\n")
    upload_hotels(admin_search_client, mixed_batch="--mixed-batch" in argv)

    run_queries(query_client)

    print("Complete.\n")


if __name__ == "__main__":
    main()
