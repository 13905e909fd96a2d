"""
Hotel data model shared by the samples.

Documents are plain dicts on the wire; the dataclasses here build those dicts
with the camelCase field names of the ``hotels`` index and read them back
for console output. The field attributes (searchable, filterable, ...) are
declared once in ``hotel_fields()`` and consumed by the service when the
index is created.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from azure.search.documents.indexes.models import (
    ComplexField,
    LexicalAnalyzerName,
    SearchableField,
    SearchFieldDataType,
    SimpleField,
)

HOTELS_INDEX_NAME = "hotels"
SYNONYM_MAP_NAME = "desc-synonymmap"


@dataclass
class GeoPoint:
    latitude: float
    longitude: float

    def to_geojson(self) -> Dict[str, Any]:
        # GeoJSON puts longitude first
        return {"type": "Point", "coordinates": [self.longitude, self.latitude]}

    @classmethod
    def from_geojson(cls, value: Optional[Dict[str, Any]]) -> Optional["GeoPoint"]:
        if not value or "coordinates" not in value:
            return None
        longitude, latitude = value["coordinates"][:2]
        return cls(latitude=latitude, longitude=longitude)


@dataclass
class Address:
    street_address: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = None

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "streetAddress": self.street_address,
            "city": self.city,
            "state": self.state,
            "zipCode": self.zip_code,
        }
        return {k: v for k, v in doc.items() if v is not None}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Address":
        return cls(
            street_address=doc.get("streetAddress"),
            city=doc.get("city"),
            state=doc.get("state"),
            zip_code=doc.get("zipCode"),
        )


@dataclass
class Room:
    room_id: Optional[str] = None
    description: Optional[str] = None
    description_fr: Optional[str] = None
    type: Optional[str] = None
    base_rate: Optional[float] = None
    bed_options: Optional[str] = None
    sleeps_count: Optional[int] = None
    smoking_allowed: Optional[bool] = None
    tags: List[str] = field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        doc = {
            "roomId": self.room_id,
            "description": self.description,
            "description_fr": self.description_fr,
            "type": self.type,
            "baseRate": self.base_rate,
            "bedOptions": self.bed_options,
            "sleepsCount": self.sleeps_count,
            "smokingAllowed": self.smoking_allowed,
            "tags": list(self.tags) if self.tags else None,
        }
        return {k: v for k, v in doc.items() if v is not None}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Room":
        return cls(
            room_id=doc.get("roomId"),
            description=doc.get("description"),
            description_fr=doc.get("description_fr"),
            type=doc.get("type"),
            base_rate=doc.get("baseRate"),
            bed_options=doc.get("bedOptions"),
            sleeps_count=doc.get("sleepsCount"),
            smoking_allowed=doc.get("smokingAllowed"),
            tags=list(doc.get("tags") or []),
        )


@dataclass
class Hotel:
    hotel_id: Optional[str] = None
    hotel_name: Optional[str] = None
    base_rate: Optional[float] = None
    description: Optional[str] = None
    description_fr: Optional[str] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    parking_included: Optional[bool] = None
    smoking_allowed: Optional[bool] = None
    last_renovation_date: Optional[datetime] = None
    rating: Optional[int] = None
    location: Optional[GeoPoint] = None
    address: Optional[Address] = None
    rooms: List[Room] = field(default_factory=list)

    def to_document(self) -> Dict[str, Any]:
        """
        Build the index document for this hotel.

        Unset values are left out so that merge actions do not overwrite
        existing fields with nulls.
        """
        doc = {
            "hotelId": self.hotel_id,
            "hotelName": self.hotel_name,
            "baseRate": self.base_rate,
            "description": self.description,
            "description_fr": self.description_fr,
            "category": self.category,
            "tags": list(self.tags) if self.tags else None,
            "parkingIncluded": self.parking_included,
            "smokingAllowed": self.smoking_allowed,
            "lastRenovationDate": format_datetime(self.last_renovation_date),
            "rating": self.rating,
            "location": self.location.to_geojson() if self.location else None,
            "address": self.address.to_document() if self.address else None,
            "rooms": [room.to_document() for room in self.rooms] if self.rooms else None,
        }
        return {k: v for k, v in doc.items() if v is not None}

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "Hotel":
        address = doc.get("address")
        return cls(
            hotel_id=doc.get("hotelId"),
            hotel_name=doc.get("hotelName"),
            base_rate=doc.get("baseRate"),
            description=doc.get("description"),
            description_fr=doc.get("description_fr"),
            category=doc.get("category"),
            tags=list(doc.get("tags") or []),
            parking_included=doc.get("parkingIncluded"),
            smoking_allowed=doc.get("smokingAllowed"),
            last_renovation_date=parse_datetime(doc.get("lastRenovationDate")),
            rating=doc.get("rating"),
            location=GeoPoint.from_geojson(doc.get("location")),
            address=Address.from_document(address) if address else None,
            rooms=[Room.from_document(room) for room in doc.get("rooms") or []],
        )

    def __str__(self) -> str:
        return format_hotel(self)


def format_datetime(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def parse_datetime(value: Union[str, datetime, None]) -> Optional[datetime]:
    if value is None or isinstance(value, datetime):
        return value
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


# ============================================================
# Index schema
# ============================================================

def room_fields() -> List[Any]:
    return [
        SimpleField(name="roomId", type=SearchFieldDataType.String, filterable=True),
        SearchableField(name="description"),
        SearchableField(name="description_fr", analyzer_name=LexicalAnalyzerName.FR_LUCENE),
        SearchableField(name="type", filterable=True, facetable=True),
        SimpleField(name="baseRate", type=SearchFieldDataType.Double, filterable=True, facetable=True),
        SearchableField(name="bedOptions", filterable=True, facetable=True),
        SimpleField(name="sleepsCount", type=SearchFieldDataType.Int32, filterable=True, facetable=True),
        SimpleField(name="smokingAllowed", type=SearchFieldDataType.Boolean, filterable=True, facetable=True),
        SearchableField(name="tags", collection=True, filterable=True, facetable=True),
    ]


def address_fields() -> List[Any]:
    return [
        SearchableField(name="streetAddress"),
        SearchableField(name="city"),
        SearchableField(name="state"),
        SearchableField(name="zipCode"),
    ]


def hotel_fields(include_rooms: bool = False, include_location: bool = True) -> List[Any]:
    """
    Field definitions for the ``hotels`` index.

    Args:
        include_rooms: Add the nested ``address`` and ``rooms`` complex fields
            used by the basic how-to sample.
        include_location: Indexer samples leave the geography point out, since
            their SQL and table sources have no matching column.

    Returns:
        List of SDK field objects, ready for ``SearchIndex(fields=...)``.
    """
    fields = [
        SimpleField(name="hotelId", type=SearchFieldDataType.String, key=True, filterable=True),
        SimpleField(
            name="baseRate",
            type=SearchFieldDataType.Double,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        SearchableField(name="description"),
        SearchableField(name="description_fr", analyzer_name=LexicalAnalyzerName.FR_LUCENE),
        SearchableField(name="hotelName", filterable=True, sortable=True),
        SearchableField(name="category", filterable=True, sortable=True, facetable=True),
        SearchableField(name="tags", collection=True, filterable=True, facetable=True),
        SimpleField(name="parkingIncluded", type=SearchFieldDataType.Boolean, filterable=True, facetable=True),
        SimpleField(name="smokingAllowed", type=SearchFieldDataType.Boolean, filterable=True, facetable=True),
        SimpleField(
            name="lastRenovationDate",
            type=SearchFieldDataType.DateTimeOffset,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
        SimpleField(
            name="rating",
            type=SearchFieldDataType.Int32,
            filterable=True,
            sortable=True,
            facetable=True,
        ),
    ]
    if include_location:
        fields.append(
            SimpleField(name="location", type=SearchFieldDataType.GeographyPoint, filterable=True, sortable=True)
        )
    if include_rooms:
        fields.append(ComplexField(name="address", fields=address_fields()))
        fields.append(ComplexField(name="rooms", collection=True, fields=room_fields()))
    return fields


# ============================================================
# Console formatting
# ============================================================

def format_hotel(hotel: Union[Hotel, Dict[str, Any]]) -> str:
    """
    Render a hotel on one tab-separated line, skipping unset fields.

    Search results only carry the selected fields, so most lines are short.
    """
    if isinstance(hotel, dict):
        hotel = Hotel.from_document(hotel)

    parts = []
    if hotel.hotel_id:
        parts.append(f"ID: {hotel.hotel_id}")
    if hotel.description:
        parts.append(f"Description: {hotel.description}")
    if hotel.description_fr:
        parts.append(f"Description (French): {hotel.description_fr}")
    if hotel.hotel_name:
        parts.append(f"Name: {hotel.hotel_name}")
    if hotel.category:
        parts.append(f"Category: {hotel.category}")
    if hotel.tags:
        parts.append(f"Tags: [{', '.join(hotel.tags)}]")
    if hotel.base_rate is not None:
        parts.append(f"Base rate: {hotel.base_rate}")
    if hotel.parking_included is not None:
        parts.append(f"Parking included: {'yes' if hotel.parking_included else 'no'}")
    if hotel.smoking_allowed is not None:
        parts.append(f"Smoking allowed: {'yes' if hotel.smoking_allowed else 'no'}")
    if hotel.last_renovation_date is not None:
        parts.append(f"Last renovated on: {hotel.last_renovation_date.isoformat()}")
    if hotel.rating is not None:
        parts.append(f"Rating: {hotel.rating}/5")
    if hotel.location is not None:
        parts.append(f"Location: Latitude {hotel.location.latitude}, longitude {hotel.location.longitude}")

    for room in hotel.rooms:
        parts.extend(_room_parts(room))

    return "\t".join(parts)


def _room_parts(room: Room) -> List[str]:
    parts = []
    if room.description:
        parts.append(f"Description: {room.description}")
    if room.description_fr:
        parts.append(f"Description (French): {room.description_fr}")
    if room.type:
        parts.append(f"Room type: {room.type}")
    if room.base_rate is not None:
        parts.append(f"Base rate: {room.base_rate}")
    if room.bed_options:
        parts.append(f"Bed options: {room.bed_options}")
    if room.sleeps_count:
        unit = "people" if room.sleeps_count > 1 else "person"
        parts.append(f"Sleeps {room.sleeps_count} {unit}")
    if room.smoking_allowed is not None:
        parts.append("Smoking room" if room.smoking_allowed else "Non-smoking room")
    return parts


# ============================================================
# Sample documents
# ============================================================

def _utc(year: int, month: int, day: int) -> datetime:
    return datetime(year, month, day, tzinfo=timezone.utc)


def sample_hotels() -> List[Hotel]:
    """Flat hotels used by the synonym, encryption and indexer samples."""
    return [
        Hotel(
            hotel_id="1",
            base_rate=199.0,
            description="Best hotel in town",
            description_fr="Meilleur hôtel en ville",
            hotel_name="Fancy Stay",
            category="Luxury",
            tags=["pool", "view", "wifi", "concierge"],
            parking_included=False,
            smoking_allowed=False,
            last_renovation_date=_utc(2010, 6, 27),
            rating=5,
            location=GeoPoint(47.678581, -122.131577),
        ),
        Hotel(
            hotel_id="2",
            base_rate=79.99,
            description="Cheapest hotel in town",
            description_fr="Hôtel le moins cher en ville",
            hotel_name="Roach Motel",
            category="Budget",
            tags=["motel", "budget"],
            parking_included=True,
            smoking_allowed=True,
            last_renovation_date=_utc(1982, 4, 28),
            rating=1,
            location=GeoPoint(49.678581, -122.131577),
        ),
        Hotel(
            hotel_id="3",
            base_rate=129.99,
            description="Close to town hall and the river",
        ),
    ]


def sample_hotels_with_rooms() -> List[Hotel]:
    """Hotels with nested rooms for the basic how-to sample."""
    return [
        Hotel(
            hotel_id="1",
            description="Best hotel in town",
            description_fr="Meilleur hôtel en ville",
            hotel_name="Fancy Stay",
            category="Luxury",
            tags=["pool", "view", "wifi", "concierge"],
            parking_included=False,
            last_renovation_date=_utc(2010, 6, 27),
            rating=5,
            location=GeoPoint(47.678581, -122.131577),
            address=Address(
                street_address="1 Microsoft Way",
                city="Redmond",
                state="WA",
                zip_code="98052",
            ),
            rooms=[
                Room(
                    room_id="1",
                    description="Deluxe Room, 2 Double Beds (Cityside)",
                    description_fr="Chambre Deluxe, 2 lits doubles (Côté ville)",
                    type="Deluxe",
                    base_rate=199.0,
                    bed_options="2 Double Beds",
                    sleeps_count=4,
                    smoking_allowed=False,
                    tags=["city", "view"],
                ),
                Room(
                    room_id="2",
                    description="Deluxe Room, 1 King Bed (Waterfront)",
                    description_fr="Chambre Deluxe, 1 lit King-Size (Face à l'eau)",
                    type="Deluxe",
                    base_rate=249.0,
                    bed_options="1 King Bed",
                    sleeps_count=3,
                    smoking_allowed=False,
                    tags=["water", "view"],
                ),
                Room(
                    room_id="3",
                    description="Deluxe Room, 2 Double Beds (Waterfront)",
                    description_fr="Chambre Deluxe, 2 lits doubles (Face à l'eau)",
                    type="Deluxe",
                    base_rate=199.0,
                    bed_options="2 Double Beds",
                    sleeps_count=4,
                    smoking_allowed=False,
                    tags=["water", "view"],
                ),
            ],
        ),
        Hotel(
            hotel_id="2",
            description="Cheapest hotel in town",
            description_fr="Hôtel le moins cher en ville",
            hotel_name="Roach Motel",
            category="Budget",
            tags=["motel", "budget"],
            parking_included=True,
            last_renovation_date=_utc(1982, 4, 28),
            rating=1,
            location=GeoPoint(49.678581, -122.131577),
            rooms=[
                Room(
                    room_id="1",
                    description="Standard Room, 1 Queen Bed",
                    description_fr="Chambre standard, 1 lit Queen-Size",
                    type="Standard",
                    base_rate=79.0,
                    bed_options="1 Queen Bed",
                    sleeps_count=3,
                    smoking_allowed=False,
                ),
                Room(
                    room_id="2",
                    description="Standard Room, 2 Queen Beds",
                    description_fr="Chambre standard, 2 lits Queen-Size",
                    type="Deluxe",
                    base_rate=87.0,
                    bed_options="2 Queen Beds",
                    sleeps_count=5,
                    smoking_allowed=False,
                ),
            ],
        ),
        Hotel(
            hotel_id="3",
            description="Close to town hall and the river",
            rooms=[
                Room(
                    room_id="1",
                    description="Standard Double Room",
                    description_fr="Chambre Double Standard",
                    type="Standard",
                    base_rate=129.0,
                    bed_options="2 Double Beds",
                    sleeps_count=5,
                    smoking_allowed=False,
                ),
            ],
        ),
    ]


def sample_autocomplete_hotels() -> List[Hotel]:
    """Hotels for the autocomplete sample; the third one is a youth hostel."""
    hotels = sample_hotels()[:2]
    hotels[0].hotel_name = "Fancy Stay Hotel"
    hotels.append(
        Hotel(
            hotel_id="3",
            base_rate=39.99,
            description="High quality, low cost hostels, suitable for families & backpackers",
            description_fr="Des auberges de qualité, abordables, adaptées aux familles et aux routards",
            hotel_name="Youth hostel",
            category="Budget",
            tags=["hostel", "free wifi"],
            parking_included=False,
            smoking_allowed=False,
            last_renovation_date=_utc(2018, 4, 28),
            rating=4,
            location=GeoPoint(49.678581, -122.131577),
        )
    )
    return hotels
