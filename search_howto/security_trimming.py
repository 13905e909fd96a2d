"""
Security trimming with Microsoft Graph group membership.

Each document in the ``securedfiles`` index lists the security groups
allowed to see it. At query time the user's groups are looked up in Graph
(and cached), and a ``search.in`` filter keeps only the documents shared
with one of those groups.

Usage:
    python -m search_howto.security_trimming
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Optional

from azure.core.exceptions import HttpResponseError
from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import SearchFieldDataType, SearchIndex, SimpleField

from .clients import get_index_client, get_search_client
from .config import ConfigurationError, exit_on_configuration_error, is_placeholder, load_settings, require
from .documents import delete_index_if_exists, upload_documents
from .graph import GraphHelper, create_graph_credential, parse_batch_groups

SECURED_FILES_INDEX_NAME = "securedfiles"


@dataclass
class SecuredFile:
    file_id: str
    name: str
    group_ids: List[str] = field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        return {"fileId": self.file_id, "name": self.name, "groupIds": list(self.group_ids)}


def secured_file_fields() -> List[Any]:
    return [
        SimpleField(name="fileId", type=SearchFieldDataType.String, key=True, filterable=True),
        SimpleField(name="name", type=SearchFieldDataType.String, filterable=True, sortable=True, facetable=True),
        SimpleField(
            name="groupIds",
            type=SearchFieldDataType.Collection(SearchFieldDataType.String),
            filterable=True,
        ),
    ]


def sample_secured_files(groups: List[str]) -> List[SecuredFile]:
    return [
        SecuredFile(file_id="1", name="secured_file_a", group_ids=[groups[0]]),
        SecuredFile(file_id="2", name="secured_file_b", group_ids=[groups[0]]),
        SecuredFile(file_id="3", name="secured_file_c", group_ids=[groups[1]]),
    ]


class GroupCache:
    """In-memory map of user principal name to group ids."""

    def __init__(self):
        self._groups: Dict[str, List[str]] = {}

    def __contains__(self, user: str) -> bool:
        return user in self._groups

    def groups_for(self, user: str) -> List[str]:
        return list(self._groups.get(user, []))

    def refresh(self, batch_response: Dict[str, Any], users: List[str]) -> None:
        """Replace the whole cache with the groups from a Graph batch response."""
        groups = parse_batch_groups(batch_response, users)
        self._groups.clear()
        self._groups.update(groups)

    def refresh_if_required(self, user: str, fetch: Callable[[str], List[str]]) -> List[str]:
        if user not in self._groups:
            self._groups[user] = list(fetch(user))
        return self.groups_for(user)


def build_group_filter(group_ids: Iterable[str]) -> str:
    """
    OData filter matching documents shared with any of ``group_ids``.

    Single quotes are doubled, as OData string literals require.
    """
    joined = ",".join(group_ids).replace("'", "''")
    return f"groupIds/any(p:search.in(p, '{joined}'))"


def delete_index(index_client: SearchIndexClient, index_name: str) -> bool:
    try:
        delete_index_if_exists(index_client, index_name)
    except HttpResponseError as e:
        print(f"Error deleting index: {e.message}\n")
        print("Did you remember to add your AZURE_SEARCH_SERVICE_NAME and AZURE_SEARCH_ADMIN_KEY to .env?\n")
        return False
    return True


def create_index(index_client: SearchIndexClient, index_name: str) -> SearchIndex:
    try:
        return index_client.create_index(SearchIndex(name=index_name, fields=secured_file_fields()))
    except HttpResponseError as e:
        print(f"Error creating index: {e.message}\n")
        raise


def index_documents(search_client: SearchClient, groups: List[str], **kwargs) -> List[str]:
    docs = [f.to_document() for f in sample_secured_files(groups)]
    return upload_documents(search_client, docs, key_field="fileId", **kwargs)


def search_for_user(search_client: SearchClient, cache: GroupCache, user: str) -> List[str]:
    """Run a match-all query trimmed to the user's groups and print the file names."""
    groups = cache.groups_for(user)
    results = search_client.search(search_text="*", filter=build_group_filter(groups), select=["name"])
    names = [doc["name"] for doc in results]
    print(f"Results for groups '{', '.join(groups)}' : {names}")
    return names


def tenant_users(tenant: str) -> List[str]:
    return [f"user{i}@{tenant}" for i in (1, 2, 3)]


def run_security_trimming_demo(
    graph: GraphHelper,
    index_client: SearchIndexClient,
    search_client: SearchClient,
    users: List[str],
    password: str,
    cache: Optional[GroupCache] = None,
    **upload_kwargs,
) -> Dict[str, List[str]]:
    cache = cache or GroupCache()

    groups = graph.create_users_and_groups(users, password)

    print("Refresh cache...\n")
    cache.refresh(graph.send_batch_request(users), users)

    if delete_index(index_client, SECURED_FILES_INDEX_NAME):
        print("Creating index...\n")
        create_index(index_client, SECURED_FILES_INDEX_NAME)

    print("Indexing documents...\n")
    index_documents(search_client, groups, **upload_kwargs)

    results = {}
    for user in users:
        print(f"Get groups for user {user}...\n")
        cache.refresh_if_required(user, graph.get_group_ids_for_user)
        results[user] = search_for_user(search_client, cache, user)
    return results


def main() -> None:
    try:
        settings = load_settings()
        require(settings, "admin_key", "graph_tenant", "graph_user_password")
        index_client = get_index_client(settings)
        # Admin key: the same client uploads and queries
        search_client = get_search_client(settings, SECURED_FILES_INDEX_NAME, use_query_key=False)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    client_id = None if is_placeholder(settings.graph_client_id) else settings.graph_client_id
    credential = create_graph_credential(client_id, settings.graph_tenant)
    graph = GraphHelper(credential)

    run_security_trimming_demo(
        graph,
        index_client,
        search_client,
        tenant_users(settings.graph_tenant),
        settings.graph_user_password,
    )
    print("Complete.\n")


if __name__ == "__main__":
    main()
