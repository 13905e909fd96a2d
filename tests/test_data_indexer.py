from azure.core.exceptions import HttpResponseError

from conftest import FakeIndexClient, no_sleep
from search_howto import data_indexer


class FakeResponse:
    def __init__(self, status_code, payload=None, text=""):
        self.status_code = status_code
        self._payload = payload or {}
        self.text = text

    def json(self):
        return self._payload


class FakeSession:
    def __init__(self, responses):
        self.headers = {}
        self.responses = list(responses)
        self.requests = []

    def request(self, method, url, params=None, json=None, timeout=None):
        self.requests.append({"method": method, "url": url, "params": params, "json": json})
        return self.responses.pop(0)


def rest_client(responses):
    session = FakeSession(responses)
    client = data_indexer.SearchRestClient("https://svc.search.windows.net/", "admin-key", session=session)
    return client, session


def status(result):
    return FakeResponse(200, {"status": "running", "lastResult": result})


def test_rest_client_sends_key_and_api_version():
    client, session = rest_client([FakeResponse(204)])

    client.send("PUT", "/datasources/usgs-datasource", {"name": "usgs-datasource"})

    assert session.headers["api-key"] == "admin-key"
    request = session.requests[0]
    assert request["url"] == "https://svc.search.windows.net/datasources/usgs-datasource"
    assert request["params"] == {"api-version": data_indexer.API_VERSION}
    assert request["json"] == {"name": "usgs-datasource"}


def test_definitions():
    data_source = data_indexer.data_source_definition("Server=usgs;")
    indexer = data_indexer.indexer_definition()

    assert data_source["credentials"] == {"connectionString": "Server=usgs;"}
    assert data_source["container"] == {"name": "GeoNamesRI"}
    assert indexer["dataSourceName"] == "usgs-datasource"
    assert indexer["targetIndexName"] == "geonames"
    assert indexer["parameters"]["maxFailedItems"] == 10


def test_geonames_fields():
    fields = {f.name: f for f in data_indexer.geonames_fields()}

    assert len(fields) == 14
    assert fields["FEATURE_ID"].key
    assert fields["DESCRIPTION"].searchable
    assert fields["ELEV_IN_M"].facetable


def test_sync_polls_until_success(capsys):
    client, session = rest_client([
        FakeResponse(201),
        FakeResponse(201),
        FakeResponse(202),
        status(None),
        status({"status": "inProgress"}),
        status({"status": "success", "itemsProcessed": 1000}),
    ])
    waits = []

    ok, detail = data_indexer.sync_data_from_azure_sql(client, "conn", poll_interval=0.5, sleep=waits.append)

    assert (ok, detail) == (True, 1000)
    assert waits == [0.5, 0.5]
    assert [r["method"] for r in session.requests] == ["PUT", "PUT", "POST", "GET", "GET", "GET"]
    assert session.requests[2]["url"].endswith("/indexers/usgs-indexer/run")
    assert "Synchronized 1000 rows..." in capsys.readouterr().out


def test_sync_reports_failure(capsys):
    client, _ = rest_client([
        FakeResponse(204),
        FakeResponse(204),
        FakeResponse(202),
        status({"status": "transientFailure", "errorMessage": "Login failed"}),
    ])

    ok, detail = data_indexer.sync_data_from_azure_sql(client, "conn", sleep=no_sleep)

    assert (ok, detail) == (False, "Login failed")
    assert "Synchronization failed: Login failed" in capsys.readouterr().out


def test_sync_stops_on_data_source_error(capsys):
    client, session = rest_client([FakeResponse(400, text="bad connection string")])

    ok, detail = data_indexer.sync_data_from_azure_sql(client, "conn", sleep=no_sleep)

    assert (ok, detail) == (False, "bad connection string")
    assert len(session.requests) == 1


def test_sync_stops_when_run_is_rejected():
    client, session = rest_client([FakeResponse(201), FakeResponse(201), FakeResponse(409, text="busy")])

    assert data_indexer.sync_data_from_azure_sql(client, "conn", sleep=no_sleep) == (False, "busy")


def test_create_geonames_index():
    client = FakeIndexClient()

    assert data_indexer.create_geonames_index(client) is True
    assert "geonames" in client.indexes


def test_create_geonames_index_unreachable_service(capsys):
    class BrokenIndexClient(FakeIndexClient):
        def delete_index(self, index, **kwargs):
            raise HttpResponseError(message="Unauthorized")

    assert data_indexer.create_geonames_index(BrokenIndexClient()) is False
    assert "AZURE_SEARCH_ADMIN_KEY" in capsys.readouterr().out
