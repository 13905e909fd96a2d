from conftest import FakeIndexClient, FakeSearchClient, no_sleep
from search_howto import howto
from search_howto.config import Settings
from search_howto.hotels import HOTELS_INDEX_NAME


def test_create_hotels_index_includes_rooms():
    client = FakeIndexClient()

    index = howto.create_hotels_index(client)

    names = [f.name for f in index.fields]
    assert index.name == HOTELS_INDEX_NAME
    assert "rooms" in names and "address" in names


def test_upload_hotels_plain():
    client = FakeSearchClient()

    assert howto.upload_hotels(client, sleep=no_sleep) == []
    assert [doc["hotelId"] for doc in client.uploaded] == ["1", "2", "3"]


def test_upload_hotels_mixed_batch():
    client = FakeSearchClient()

    howto.upload_hotels(client, mixed_batch=True, sleep=no_sleep)

    actions = client.batches[0].actions
    assert [a.action_type for a in actions] == ["upload", "upload", "mergeOrUpload", "delete"]


def test_run_queries(capsys):
    client = FakeSearchClient(results=[{"hotelName": "Roach Motel"}])

    howto.run_queries(client)

    assert [s["search_text"] for s in client.searches] == ["budget", "*", "*", "motel"]
    assert client.searches[1]["filter"] == "rooms/any(r: r/baseRate lt 150)"
    assert client.searches[2]["order_by"] == ["lastRenovationDate desc"]
    assert client.searches[2]["top"] == 2
    assert capsys.readouterr().out.count("Name: Roach Motel") == 4


def test_main(monkeypatch, capsys):
    index_client = FakeIndexClient()
    search_client = FakeSearchClient()
    monkeypatch.setattr(howto, "load_settings", lambda: Settings(service_name="svc", admin_key="k"))
    monkeypatch.setattr(howto, "get_index_client", lambda settings: index_client)
    monkeypatch.setattr(howto, "get_search_client", lambda settings, name, use_query_key=True: search_client)
    monkeypatch.setattr("search_howto.documents.time.sleep", no_sleep)

    howto.main(["--mixed-batch"])

    assert index_client.deleted == [HOTELS_INDEX_NAME]
    assert HOTELS_INDEX_NAME in index_client.indexes
    assert len(search_client.batches) == 1
    assert capsys.readouterr().out.endswith("Complete.\n\n")
