"""
USGS geonames sample: create an index, then sync it from Azure SQL through
the raw REST API.

The index is created with the SDK. The data source, the indexer, the run
request and the status polling all go through plain HTTP calls on a pooled
``requests.Session``, to show what the SDK does under the hood.

Usage:
    python -m search_howto.data_indexer
"""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

import requests
from azure.core.exceptions import HttpResponseError
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import SearchField, SearchFieldDataType, SearchIndex

from .clients import get_index_client
from .config import (
    ConfigurationError,
    exit_on_configuration_error,
    load_settings,
    require,
    search_endpoint,
)
from .documents import delete_index_if_exists

logger = logging.getLogger(__name__)

API_VERSION = "2024-07-01"

GEONAMES_INDEX_NAME = "geonames"
DATA_SOURCE_NAME = "usgs-datasource"
INDEXER_NAME = "usgs-indexer"
SOURCE_TABLE_NAME = "GeoNamesRI"


def _field(name: str, data_type: str, key: bool = False, searchable: bool = False,
           filterable: bool = False, sortable: bool = False, facetable: bool = False) -> SearchField:
    return SearchField(
        name=name,
        type=data_type,
        key=key,
        searchable=searchable,
        filterable=filterable,
        sortable=sortable,
        facetable=facetable,
        hidden=False,
    )


def geonames_fields():
    text, number, date = SearchFieldDataType.String, SearchFieldDataType.Int32, SearchFieldDataType.DateTimeOffset
    return [
        _field("FEATURE_ID", text, key=True),
        _field("FEATURE_NAME", text, searchable=True, filterable=True, sortable=True),
        _field("FEATURE_CLASS", text, searchable=True, filterable=True, sortable=True),
        _field("STATE_ALPHA", text, searchable=True, filterable=True, sortable=True),
        _field("STATE_NUMERIC", number, filterable=True, sortable=True, facetable=True),
        _field("COUNTY_NAME", text, searchable=True, filterable=True, sortable=True),
        _field("COUNTY_NUMERIC", number, filterable=True, sortable=True, facetable=True),
        _field("ELEV_IN_M", number, filterable=True, sortable=True, facetable=True),
        _field("ELEV_IN_FT", number, filterable=True, sortable=True, facetable=True),
        _field("MAP_NAME", text, searchable=True, filterable=True, sortable=True),
        _field("DESCRIPTION", text, searchable=True),
        _field("HISTORY", text, searchable=True),
        _field("DATE_CREATED", date, filterable=True, sortable=True, facetable=True),
        _field("DATE_EDITED", date, filterable=True, sortable=True, facetable=True),
    ]


class SearchRestClient:
    """
    Minimal REST client for the search service management API.

    Uses one ``requests.Session`` for connection reuse across calls.
    """

    def __init__(self, endpoint: str, api_key: str, api_version: str = API_VERSION,
                 session: Optional[requests.Session] = None, timeout: float = 30):
        self.endpoint = endpoint.rstrip("/")
        self.api_version = api_version
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"api-key": api_key, "Content-Type": "application/json"})

    def send(self, method: str, path: str, body: Optional[Dict[str, Any]] = None) -> requests.Response:
        url = f"{self.endpoint}/{path.lstrip('/')}"
        logger.debug("%s %s", method, url)
        response = self.session.request(
            method,
            url,
            params={"api-version": self.api_version},
            json=body,
            timeout=self.timeout,
        )
        logger.debug("%s %s -> %s", method, url, response.status_code)
        return response


def create_geonames_index(index_client: SearchIndexClient) -> bool:
    """
    Recreate the geonames index.

    Returns:
        bool: False when the service could not be reached, which usually
        means the endpoint or key in ``.env`` is wrong.
    """
    try:
        delete_index_if_exists(index_client, GEONAMES_INDEX_NAME)
    except HttpResponseError as e:
        print(f"Error deleting index: {e.message}\n")
        print("Did you remember to add your AZURE_SEARCH_SERVICE_NAME and AZURE_SEARCH_ADMIN_KEY to .env?\n")
        return False

    print("Creating index...\n")
    try:
        index_client.create_index(SearchIndex(name=GEONAMES_INDEX_NAME, fields=geonames_fields()))
    except HttpResponseError as e:
        print(f"Error creating index: {e.message}\n")
        return False
    return True


def data_source_definition(connection_string: str) -> Dict[str, Any]:
    return {
        "name": DATA_SOURCE_NAME,
        "description": "USGS Dataset",
        "type": "azuresql",
        "credentials": {"connectionString": connection_string},
        "container": {"name": SOURCE_TABLE_NAME},
    }


def indexer_definition() -> Dict[str, Any]:
    return {
        "name": INDEXER_NAME,
        "description": "USGS data indexer",
        "dataSourceName": DATA_SOURCE_NAME,
        "targetIndexName": GEONAMES_INDEX_NAME,
        "parameters": {
            "maxFailedItems": 10,
            "maxFailedItemsPerBatch": 5,
            "base64EncodeKeys": False,
        },
    }


def sync_data_from_azure_sql(
    client: SearchRestClient,
    connection_string: str,
    poll_interval: float = 1.0,
    sleep: Optional[Callable[[float], None]] = None,
) -> Tuple[bool, Any]:
    """
    Create the data source and indexer, run it and wait for the result.

    Returns:
        Tuple of (success, detail): the number of rows synchronised on
        success, otherwise the error text from the service.
    """
    print("Creating Data Source...\n")
    response = client.send("PUT", f"datasources/{DATA_SOURCE_NAME}", data_source_definition(connection_string))
    if response.status_code not in (201, 204):
        print(f"Error creating data source: {response.text}")
        return False, response.text

    print("Creating Indexer...\n")
    response = client.send("PUT", f"indexers/{INDEXER_NAME}", indexer_definition())
    if response.status_code not in (201, 204):
        print(f"Error creating indexer: {response.text}")
        return False, response.text

    print("Syncing data...\n")
    response = client.send("POST", f"indexers/{INDEXER_NAME}/run")
    if response.status_code != 202:
        print(f"Error running indexer: {response.text}")
        return False, response.text

    print("Synchronization running...\n")
    while True:
        response = client.send("GET", f"indexers/{INDEXER_NAME}/status")
        if response.status_code != 200:
            print(f"Error polling for indexer status: {response.text}")
            return False, response.text

        last_result = response.json().get("lastResult")
        status = last_result.get("status") if last_result else "inProgress"

        if status == "inProgress":
            print("Synchronization running...\n")
            (sleep or time.sleep)(poll_interval)
        elif status == "success":
            items = last_result.get("itemsProcessed")
            print(f"Synchronized {items} rows...\n")
            return True, items
        else:
            message = last_result.get("errorMessage")
            print(f"Synchronization failed: {message}\n")
            return False, message


def main() -> None:
    try:
        settings = load_settings()
        require(settings, "admin_key", "usgs_connection_string")
        index_client = get_index_client(settings)
        rest_client = SearchRestClient(search_endpoint(settings), settings.admin_key)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    print("Deleting index...\n")
    if create_geonames_index(index_client):
        print("Sync documents from Azure SQL...\n")
        sync_data_from_azure_sql(rest_client, settings.usgs_connection_string)
    print("Complete.\n")


if __name__ == "__main__":
    main()
