"""Shared fakes for the search client tests. Nothing here talks to Azure."""

import pytest
from azure.search.documents.models import AutocompleteItem, SuggestResult

from search_howto.clients import reset_clients
from search_howto.config import ENV_KEYS


class IndexingResult:
    def __init__(self, key, succeeded=True):
        self.key = key
        self.succeeded = succeeded


class FakeSearchResults(list):
    """List of hits that also answers ``get_facets()`` like the SDK pager."""

    def __init__(self, items=(), facets=None):
        super().__init__(items)
        self._facets = facets

    def get_facets(self):
        return self._facets


class FakeSearchClient:
    def __init__(self, results=None, suggestions=None, completions=None, facets=None):
        self.results = results or []
        self.suggestions = suggestions or []
        self.completions = completions or []
        self.facets = facets
        self.uploaded = []
        self.batches = []
        self.searches = []
        self.suggest_calls = []
        self.autocomplete_calls = []
        self.error = None

    def upload_documents(self, documents):
        if self.error:
            raise self.error
        self.uploaded.extend(documents)
        return [IndexingResult(str(doc.get("hotelId", doc.get("fileId")))) for doc in documents]

    def index_documents(self, batch):
        if self.error:
            raise self.error
        self.batches.append(batch)
        return [IndexingResult(str(i)) for i, _ in enumerate(batch.actions)]

    def search(self, search_text=None, **kwargs):
        if self.error:
            raise self.error
        self.searches.append(dict(kwargs, search_text=search_text))
        return FakeSearchResults(self.results, self.facets)

    def suggest(self, search_text, suggester_name, **kwargs):
        self.suggest_calls.append(dict(kwargs, search_text=search_text, suggester_name=suggester_name))
        # raw service payloads, wrapped the way the SDK returns them
        return [SuggestResult(item) for item in self.suggestions]

    def autocomplete(self, search_text, suggester_name, **kwargs):
        self.autocomplete_calls.append(dict(kwargs, search_text=search_text, suggester_name=suggester_name))
        return [AutocompleteItem(item) for item in self.completions]


class FakeIndexClient:
    def __init__(self):
        self.indexes = {}
        self.synonym_maps = {}
        self.deleted = []
        self.deleted_synonym_maps = []

    def delete_index(self, index, **kwargs):
        from azure.core.exceptions import ResourceNotFoundError

        name = getattr(index, "name", index)
        self.deleted.append(name)
        if name not in self.indexes:
            raise ResourceNotFoundError("not found")
        del self.indexes[name]

    def create_index(self, index):
        self.indexes[index.name] = index
        return index

    def create_or_update_index(self, index, **kwargs):
        self.indexes[index.name] = index
        return index

    def get_index(self, name):
        return self.indexes[name]

    def delete_synonym_map(self, name, **kwargs):
        from azure.core.exceptions import ResourceNotFoundError

        self.deleted_synonym_maps.append(name)
        if name not in self.synonym_maps:
            raise ResourceNotFoundError("not found")
        del self.synonym_maps[name]

    def create_synonym_map(self, synonym_map):
        self.synonym_maps[synonym_map.name] = synonym_map
        return synonym_map

    def create_or_update_synonym_map(self, synonym_map, **kwargs):
        self.synonym_maps[synonym_map.name] = synonym_map
        return synonym_map


def no_sleep(seconds):
    pass


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for env_name in ENV_KEYS.values():
        monkeypatch.delenv(env_name, raising=False)
    reset_clients()
    yield
    reset_clients()


@pytest.fixture
def search_client():
    return FakeSearchClient()


@pytest.fixture
def index_client():
    return FakeIndexClient()
