from datetime import datetime, timezone

from search_howto.hotels import (
    GeoPoint,
    Hotel,
    Room,
    format_datetime,
    format_hotel,
    hotel_fields,
    parse_datetime,
    sample_autocomplete_hotels,
    sample_hotels,
    sample_hotels_with_rooms,
)


def test_to_document_uses_index_field_names():
    doc = sample_hotels()[0].to_document()

    assert doc["hotelId"] == "1"
    assert doc["hotelName"] == "Fancy Stay"
    assert doc["baseRate"] == 199.0
    assert doc["parkingIncluded"] is False
    assert doc["lastRenovationDate"] == "2010-06-27T00:00:00Z"
    assert doc["location"] == {"type": "Point", "coordinates": [-122.131577, 47.678581]}


def test_to_document_omits_unset_fields():
    doc = sample_hotels()[2].to_document()

    assert doc == {
        "hotelId": "3",
        "baseRate": 129.99,
        "description": "Close to town hall and the river",
    }


def test_nested_rooms_and_address():
    doc = sample_hotels_with_rooms()[0].to_document()

    assert doc["address"]["zipCode"] == "98052"
    assert len(doc["rooms"]) == 3
    assert doc["rooms"][0]["bedOptions"] == "2 Double Beds"
    assert doc["rooms"][0]["smokingAllowed"] is False


def test_from_document_reads_search_results():
    hotel = Hotel.from_document(
        {
            "hotelId": "2",
            "hotelName": "Roach Motel",
            "lastRenovationDate": "1982-04-28T00:00:00Z",
            "location": {"type": "Point", "coordinates": [-122.1, 49.6]},
            "rooms": [{"type": "Standard", "sleepsCount": 1}],
            "@search.score": 1.0,
        }
    )

    assert hotel.hotel_name == "Roach Motel"
    assert hotel.last_renovation_date == datetime(1982, 4, 28, tzinfo=timezone.utc)
    assert hotel.location == GeoPoint(latitude=49.6, longitude=-122.1)
    assert hotel.rooms == [Room(type="Standard", sleeps_count=1)]


def test_datetime_helpers():
    assert format_datetime(None) is None
    assert format_datetime(datetime(2020, 1, 2, 3, 4, 5)) == "2020-01-02T03:04:05Z"
    assert parse_datetime("2020-01-02T03:04:05Z") == datetime(2020, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def test_format_hotel_skips_missing_fields():
    assert format_hotel({"hotelName": "Fancy Stay"}) == "Name: Fancy Stay"
    assert format_hotel({"hotelId": "3", "description": "Close"}) == "ID: 3\tDescription: Close"


def test_format_hotel_full_line():
    line = format_hotel(sample_hotels()[1])

    assert line.split("\t") == [
        "ID: 2",
        "Description: Cheapest hotel in town",
        "Description (French): Hôtel le moins cher en ville",
        "Name: Roach Motel",
        "Category: Budget",
        "Tags: [motel, budget]",
        "Base rate: 79.99",
        "Parking included: yes",
        "Smoking allowed: yes",
        "Last renovated on: 1982-04-28T00:00:00+00:00",
        "Rating: 1/5",
        "Location: Latitude 49.678581, longitude -122.131577",
    ]


def test_format_hotel_rooms():
    line = format_hotel(Hotel(hotel_id="9", rooms=[Room(type="Suite", sleeps_count=1, smoking_allowed=True)]))

    assert line == "ID: 9\tRoom type: Suite\tSleeps 1 person\tSmoking room"
    assert str(Hotel(hotel_name="x")) == "Name: x"


def test_hotel_fields():
    fields = {f.name: f for f in hotel_fields()}

    assert fields["hotelId"].key
    assert fields["hotelName"].searchable
    assert fields["category"].facetable
    assert "location" in fields
    assert "rooms" not in fields


def test_hotel_fields_variants():
    with_rooms = [f.name for f in hotel_fields(include_rooms=True)]
    without_location = [f.name for f in hotel_fields(include_location=False)]

    assert with_rooms[-2:] == ["address", "rooms"]
    assert "location" not in without_location


def test_autocomplete_sample_has_hostel():
    names = [h.hotel_name for h in sample_autocomplete_hotels()]

    assert names == ["Fancy Stay Hotel", "Roach Motel", "Youth hostel"]
    # the shared sample is not mutated
    assert sample_hotels()[0].hotel_name == "Fancy Stay"


def test_rooms_carry_room_ids():
    doc = sample_hotels_with_rooms()[1].to_document()

    assert [room["roomId"] for room in doc["rooms"]] == ["1", "2"]
    assert Hotel.from_document(doc).rooms[1].room_id == "2"
    room_field = next(f for f in hotel_fields(include_rooms=True) if f.name == "rooms")
    assert "roomId" in [f.name for f in room_field.fields]
