import pytest
import requests

from search_howto.graph import GraphHelper, build_batch_request, parse_batch_groups

USERS = ["user1@contoso.com", "user2@contoso.com", "user3@contoso.com"]


class FakeToken:
    token = "token-123"


class FakeCredential:
    def __init__(self):
        self.scopes = []

    def get_token(self, *scopes, **kwargs):
        self.scopes.extend(scopes)
        return FakeToken()


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload or {}
        self.status_code = status_code

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    def __init__(self, handler):
        self.handler = handler
        self.posts = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.posts.append({"url": url, "json": json, "headers": headers})
        return self.handler(url, json)


def directory_handler():
    counter = {"n": 0}

    def handle(url, body):
        counter["n"] += 1
        if url.endswith("/$ref"):
            return FakeResponse(status_code=204)
        return FakeResponse({"id": f"id-{counter['n']}"}, status_code=201)

    return handle


def test_build_batch_request():
    batch = build_batch_request(USERS[:2])

    assert [r["id"] for r in batch["requests"]] == ["0", "1"]
    assert batch["requests"][1]["url"] == "users/user2@contoso.com/microsoft.graph.getMemberGroups"
    assert batch["requests"][0]["body"] == {"securityEnabledOnly": True}


def test_parse_batch_groups_matches_on_id():
    response = {
        "responses": [
            {"id": "1", "status": 200, "body": {"value": ["g2"]}},
            {"id": "0", "status": 200, "body": {"value": [
                {"@odata.type": "#microsoft.graph.group", "id": "g1"},
                {"@odata.type": "#microsoft.graph.directoryRole", "id": "role"},
            ]}},
        ]
    }

    assert parse_batch_groups(response, USERS) == {USERS[0]: ["g1"], USERS[1]: ["g2"]}


def test_requests_carry_bearer_token():
    credential = FakeCredential()
    session = FakeSession(lambda url, body: FakeResponse({"responses": []}))
    graph = GraphHelper(credential, session=session)

    assert graph.send_batch_request(USERS) == {"responses": []}

    post = session.posts[0]
    assert post["url"] == "https://graph.microsoft.com/v1.0/$batch"
    assert post["headers"]["Authorization"] == "Bearer token-123"
    assert credential.scopes == ["https://graph.microsoft.com/.default"]


def test_create_users_and_groups():
    session = FakeSession(directory_handler())
    graph = GraphHelper(FakeCredential(), session=session)

    groups = graph.create_users_and_groups(USERS, "P@ssw0rd!")

    urls = [p["url"].replace(graph.root + "/", "") for p in session.posts]
    assert urls == [
        "groups", "users", "groups/id-1/members/$ref", "users", "groups/id-1/members/$ref",
        "groups", "users", "groups/id-6/members/$ref",
    ]
    assert groups == ["id-1", "id-6"]
    assert session.posts[1]["json"]["userPrincipalName"] == USERS[0]
    assert session.posts[1]["json"]["passwordProfile"] == {"password": "P@ssw0rd!"}
    assert session.posts[2]["json"] == {"@odata.id": "https://graph.microsoft.com/v1.0/directoryObjects/id-2"}


def test_create_users_and_groups_reports_errors(capsys):
    graph = GraphHelper(FakeCredential(), session=FakeSession(lambda url, body: FakeResponse(status_code=403)))

    with pytest.raises(requests.HTTPError):
        graph.create_users_and_groups(USERS, "pw")

    assert "Error creating users and groups" in capsys.readouterr().out


def test_get_group_ids_follows_next_link():
    next_link = "https://graph.microsoft.com/v1.0/users/u/getMemberGroups?$skiptoken=abc"
    pages = [
        FakeResponse({"value": ["g1", "g2"], "@odata.nextLink": next_link}),
        FakeResponse({"value": ["g3"]}),
    ]
    session = FakeSession(lambda url, body: pages.pop(0))
    graph = GraphHelper(FakeCredential(), session=session)

    assert graph.get_group_ids_for_user("u") == ["g1", "g2", "g3"]
    assert session.posts[1]["url"] == next_link
