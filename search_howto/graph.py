"""
Microsoft Graph helper for the security-trimming sample.

Creates demo users and security groups, and looks up which groups a user
belongs to, either one user at a time or for many users in a single
``$batch`` request. Tokens come from azure-identity; HTTP goes through a
pooled ``requests.Session``.
"""

import logging
from typing import Any, Dict, List, Optional

import requests
from azure.core.credentials import TokenCredential
from azure.identity import DefaultAzureCredential, InteractiveBrowserCredential

logger = logging.getLogger(__name__)

GRAPH_ROOT = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"
GROUP_ODATA_TYPE = "#microsoft.graph.group"


def create_graph_credential(client_id: Optional[str] = None, tenant: Optional[str] = None) -> TokenCredential:
    """
    Credential for Graph calls.

    With an application (client) id the user signs in interactively, as in
    a desktop app registration; otherwise the default credential chain is
    used (Azure CLI, managed identity, ...).
    """
    if client_id:
        return InteractiveBrowserCredential(client_id=client_id, tenant_id=tenant)
    return DefaultAzureCredential()


def build_batch_request(users: List[str]) -> Dict[str, Any]:
    """
    Build a JSON batch asking for the security groups of each user.

    The request ``id`` is the user's position in ``users``; responses can
    come back in any order and are matched on it.
    """
    return {
        "requests": [
            {
                "id": str(i),
                "method": "POST",
                "url": f"users/{user}/microsoft.graph.getMemberGroups",
                "body": {"securityEnabledOnly": True},
                "headers": {"Content-Type": "application/json"},
            }
            for i, user in enumerate(users)
        ]
    }


def parse_batch_groups(batch_response: Dict[str, Any], users: List[str]) -> Dict[str, List[str]]:
    """
    Map each user to their group ids from a ``$batch`` response.

    ``getMemberGroups`` returns bare id strings; directory-object payloads
    (``memberOf``) are also accepted, keeping only ``#microsoft.graph.group``
    entries.
    """
    groups: Dict[str, List[str]] = {}
    for response in batch_response.get("responses", []):
        user = users[int(response["id"])]
        body = response.get("body") or {}
        user_groups = []
        for value in body.get("value") or []:
            if isinstance(value, str):
                user_groups.append(value)
            elif value.get("@odata.type") == GROUP_ODATA_TYPE:
                user_groups.append(value["id"])
        groups[user] = user_groups
    return groups


class GraphHelper:
    def __init__(self, credential: TokenCredential, session: Optional[requests.Session] = None,
                 root: str = GRAPH_ROOT, timeout: float = 30):
        self.credential = credential
        self.session = session or requests.Session()
        self.root = root.rstrip("/")
        self.timeout = timeout

    def _post(self, path: str, body: Dict[str, Any]) -> requests.Response:
        url = path if path.startswith("https://") else f"{self.root}/{path.lstrip('/')}"
        token = self.credential.get_token(GRAPH_SCOPE).token
        logger.debug("POST %s", url)
        response = self.session.post(
            url,
            json=body,
            headers={"Authorization": f"Bearer {token}", "Content-Type": "application/json"},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response

    def send_batch_request(self, users: List[str]) -> Dict[str, Any]:
        return self._post("$batch", build_batch_request(users)).json()

    def _create_group(self, display_name: str, mail_nickname: str) -> str:
        group = {
            "displayName": display_name,
            "securityEnabled": True,
            "mailEnabled": False,
            "mailNickname": mail_nickname,
        }
        return self._post("groups", group).json()["id"]

    def _create_user(self, user_principal_name: str, ordinal: str, number: int, password: str) -> str:
        user = {
            "accountEnabled": True,
            "givenName": f"{ordinal} User",
            "surname": f"User{number}",
            "mailNickname": f"User{number}",
            "displayName": f"{ordinal} User",
            "userPrincipalName": user_principal_name,
            "passwordProfile": {"password": password},
        }
        return self._post("users", user).json()["id"]

    def _add_member(self, group_id: str, user_id: str) -> None:
        self._post(
            f"groups/{group_id}/members/$ref",
            {"@odata.id": f"{self.root}/directoryObjects/{user_id}"},
        )

    def create_users_and_groups(self, users: List[str], password: str) -> List[str]:
        """
        Create two security groups and three users.

        The first two users join the first group and the third user joins
        the second group.

        Returns:
            List[str]: The two new group ids, in creation order.
        """
        groups = []
        try:
            group_id = self._create_group("My First Prog Group", "group1")
            groups.append(group_id)
            for number, ordinal in ((1, "First"), (2, "Second")):
                user_id = self._create_user(users[number - 1], ordinal, number, password)
                self._add_member(group_id, user_id)

            group_id = self._create_group("My Second Prog Group", "group2")
            groups.append(group_id)
            user_id = self._create_user(users[2], "Third", 3, password)
            self._add_member(group_id, user_id)
        except requests.RequestException as e:
            print(f"Error creating users and groups: {e}\n")
            raise
        return groups

    def get_group_ids_for_user(self, user_principal_name: str) -> List[str]:
        groups: List[str] = []
        path: Optional[str] = f"users/{user_principal_name}/getMemberGroups"
        try:
            while path:
                page = self._post(path, {"securityEnabledOnly": True}).json()
                groups.extend(page.get("value", []))
                path = page.get("@odata.nextLink")
        except requests.RequestException as e:
            print(f"Error retrieving groups: {e}\n")
            raise
        return groups
