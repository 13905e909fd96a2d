"""
Azure AI Search client factories.

The SDK pools connections internally, so each client is created lazily and
reused for the lifetime of the process (one per endpoint, key and index).
"""

from typing import Dict, Tuple

from azure.core.credentials import AzureKeyCredential
from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient, SearchIndexerClient

from .config import Settings, is_placeholder, require, search_endpoint

_index_clients: Dict[Tuple[str, str], SearchIndexClient] = {}
_indexer_clients: Dict[Tuple[str, str], SearchIndexerClient] = {}
_search_clients: Dict[Tuple[str, str, str], SearchClient] = {}


def get_index_client(settings: Settings) -> SearchIndexClient:
    """Admin client for index and synonym-map management."""
    require(settings, "admin_key")
    endpoint = search_endpoint(settings)
    key = (endpoint, settings.admin_key)
    if key not in _index_clients:
        _index_clients[key] = SearchIndexClient(
            endpoint=endpoint,
            credential=AzureKeyCredential(settings.admin_key),
        )
    return _index_clients[key]


def get_indexer_client(settings: Settings) -> SearchIndexerClient:
    """Admin client for data sources and indexers."""
    require(settings, "admin_key")
    endpoint = search_endpoint(settings)
    key = (endpoint, settings.admin_key)
    if key not in _indexer_clients:
        _indexer_clients[key] = SearchIndexerClient(
            endpoint=endpoint,
            credential=AzureKeyCredential(settings.admin_key),
        )
    return _indexer_clients[key]


def get_search_client(settings: Settings, index_name: str, use_query_key: bool = True) -> SearchClient:
    """
    Document client for a single index.

    Args:
        settings: Loaded settings.
        index_name: Target index.
        use_query_key: Prefer the read-only query key when one is configured.
            Uploads need the admin key, so pass False for those.
    """
    if use_query_key and not is_placeholder(settings.query_key):
        api_key = settings.query_key
    else:
        require(settings, "admin_key")
        api_key = settings.admin_key

    endpoint = search_endpoint(settings)
    key = (endpoint, api_key, index_name)
    if key not in _search_clients:
        _search_clients[key] = SearchClient(
            endpoint=endpoint,
            index_name=index_name,
            credential=AzureKeyCredential(api_key),
        )
    return _search_clients[key]


def reset_clients() -> None:
    _index_clients.clear()
    _indexer_clients.clear()
    _search_clients.clear()
