"""
ETag explainer: conditional updates and deletes on an index.

Every top-level resource in Azure AI Search carries an ETag that tracks the
version you are working on. Passing a match condition with an update or
delete makes the service reject the request when the ETag no longer matches,
which is how two clients are kept from overwriting each other's changes.

Usage:
    python -m search_howto.etags
"""

import sys

from azure.core import MatchConditions
from azure.core.exceptions import ResourceModifiedError
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import (
    LexicalAnalyzerName,
    SearchableField,
    SearchFieldDataType,
    SearchIndex,
    SimpleField,
)

from .clients import get_index_client
from .config import ConfigurationError, exit_on_configuration_error, load_settings
from .documents import delete_index_if_exists

TEST_INDEX_NAME = "test"


def define_test_index() -> SearchIndex:
    return SearchIndex(
        name=TEST_INDEX_NAME,
        fields=[SimpleField(name="id", type=SearchFieldDataType.String, key=True)],
    )


def run_etag_demo(index_client: SearchIndexClient) -> None:
    """
    Walk through ETag behaviour against a live service.

    Exits the process with status 1 if the conflicting update from the
    second client is accepted, since that means access conditions are not
    being honoured.
    """
    print("Deleting index...\n")
    delete_index_if_exists(index_client, TEST_INDEX_NAME)

    # A definition that was never sent to the service has no ETag yet.
    index = define_test_index()
    print(f"Test index hasn't been created yet, so its ETag should be blank. ETag: '{index.e_tag or ''}'")

    # Keep the object returned by the service; the local one still has a blank ETag.
    print("Creating index...\n")
    index = index_client.create_index(index)
    print(f"Test index created; Its ETag should be populated. ETag: '{index.e_tag}'")

    # IfPresent turns create-or-update into update-only.
    index.fields.append(SearchableField(name="name", analyzer_name=LexicalAnalyzerName.EN_MICROSOFT))
    index = index_client.create_or_update_index(index, match_condition=MatchConditions.IfPresent)
    print(f"Test index updated; Its ETag should have changed since it was created. ETag: '{index.e_tag}'")

    index_for_client1 = index
    index_for_client2 = index_client.get_index(TEST_INDEX_NAME)

    print("Simulating concurrent update. To start, both clients see the same ETag.")
    print(f"Client 1 ETag: '{index_for_client1.e_tag}' Client 2 ETag: '{index_for_client2.e_tag}'")

    index_for_client1.fields.append(SimpleField(name="a", type=SearchFieldDataType.Int32))
    index_for_client1 = index_client.create_or_update_index(
        index_for_client1,
        match_condition=MatchConditions.IfNotModified,
    )
    print(f"Test index updated by client 1; ETag: '{index_for_client1.e_tag}'")

    # Client 2 still holds the old ETag, so its update must be rejected.
    try:
        index_for_client2.fields.append(SimpleField(name="b", type=SearchFieldDataType.Boolean))
        index_client.create_or_update_index(
            index_for_client2,
            match_condition=MatchConditions.IfNotModified,
        )
        print("Whoops; This shouldn't happen")
        sys.exit(1)
    except ResourceModifiedError:
        print("Client 2 failed to update the index, as expected.")

    # One round trip instead of an existence check followed by a delete.
    print("Deleting index...\n")
    index_client.delete_index(index_for_client1, match_condition=MatchConditions.IfPresent)


def main() -> None:
    try:
        index_client = get_index_client(load_settings())
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    run_etag_demo(index_client)
    print("Complete.\n")


if __name__ == "__main__":
    main()
