"""
Document and index helpers shared by the console samples.

Every helper wraps a single SDK call, prints what happened and lets the
sample continue, the way the tutorials are meant to be read.
"""

import time
from typing import Any, Callable, Dict, Iterable, List, Optional

from azure.core.exceptions import HttpResponseError, ResourceNotFoundError
from azure.search.documents import IndexDocumentsBatch, SearchClient
from azure.search.documents.indexes import SearchIndexClient

from .hotels import format_hotel

# Seconds to wait after an upload so the documents are searchable
INDEXING_DELAY = 2.0


def delete_index_if_exists(index_client: SearchIndexClient, index_name: str) -> bool:
    """
    Delete an index, treating a missing index as already deleted.

    Returns:
        bool: True if an index was deleted, False if none existed.
    """
    try:
        index_client.delete_index(index_name)
    except ResourceNotFoundError:
        return False
    return True


def delete_synonym_map_if_exists(index_client: SearchIndexClient, name: str) -> bool:
    try:
        index_client.delete_synonym_map(name)
    except ResourceNotFoundError:
        return False
    return True


def report_failed_keys(results: Iterable[Any]) -> List[str]:
    failed = [r.key for r in results if not r.succeeded]
    if failed:
        # Under load the service may reject part of a batch; the samples
        # just report the keys and carry on.
        print(f"Failed to index some of the documents: {', '.join(failed)}")
    return failed


def upload_documents(
    search_client: SearchClient,
    documents: List[Dict[str, Any]],
    key_field: str = "hotelId",
    delay: float = INDEXING_DELAY,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[str]:
    """
    Upload documents and wait for them to be indexed.

    Args:
        search_client: Client bound to the target index (admin key).
        documents: Documents as plain dicts.
        key_field: Key field name, used to report every key when the whole
            request fails.
        delay: Seconds to wait after the upload.
        sleep: Injected for tests.

    Returns:
        List[str]: Keys of documents the service rejected.
    """
    try:
        results = search_client.upload_documents(documents=documents)
        failed = report_failed_keys(results)
    except HttpResponseError as e:
        print(f"✗ Failed to upload documents: {e.message}")
        failed = [str(doc.get(key_field)) for doc in documents]

    print("Waiting for documents to be indexed...\n")
    (sleep or time.sleep)(delay)
    return failed


def index_batch(
    search_client: SearchClient,
    upload: Optional[List[Dict[str, Any]]] = None,
    merge_or_upload: Optional[List[Dict[str, Any]]] = None,
    delete: Optional[List[Dict[str, Any]]] = None,
    key_field: str = "hotelId",
    delay: float = INDEXING_DELAY,
    sleep: Optional[Callable[[float], None]] = None,
) -> List[str]:
    """
    Send one batch mixing upload, merge-or-upload and delete actions.

    Returns:
        List[str]: Keys the service rejected; every key in the batch when
        the whole request fails.
    """
    batch = IndexDocumentsBatch()
    if upload:
        batch.add_upload_actions(upload)
    if merge_or_upload:
        batch.add_merge_or_upload_actions(merge_or_upload)
    if delete:
        batch.add_delete_actions(delete)

    try:
        results = search_client.index_documents(batch)
        failed = report_failed_keys(results)
    except HttpResponseError as e:
        print(f"✗ Failed to index batch: {e.message}")
        documents = (upload or []) + (merge_or_upload or []) + (delete or [])
        failed = [str(doc.get(key_field)) for doc in documents]

    print("Waiting for documents to be indexed...\n")
    (sleep or time.sleep)(delay)
    return failed


def write_documents(
    results: Iterable[Dict[str, Any]],
    empty_message: Optional[str] = None,
    formatter: Callable[[Dict[str, Any]], str] = format_hotel,
) -> List[Dict[str, Any]]:
    """Print each search hit on its own line followed by a blank line."""
    documents = list(results)
    if not documents and empty_message:
        print(empty_message)
    for doc in documents:
        print(formatter(doc))
    print()
    return documents
