"""
Azure Cosmos DB import script for the hotel sample data.

Seeds the ``hotels`` container that the multiple-data-source indexer reads
from. Authenticates with DefaultAzureCredential, so no account key is
needed: Azure CLI login locally, managed identity in Azure.

Features:
- Upserts the built-in sample hotels, or hotels read from a CSV file
- Idempotent: documents are keyed by hotel id, so re-running is safe
- Blank CSV cells are stored as missing fields

Environment Variables:
- COSMOS_ENDPOINT: Cosmos DB account endpoint URL
- DATABASE_NAME: Cosmos DB database (default ``hotels-db``)
- CONTAINER_NAME: Cosmos DB container (default ``hotels``)

CSV Format:
    hotelId,hotelName,category,baseRate,rating,parkingIncluded,smokingAllowed,
    lastRenovationDate,tags,description
    (tags are separated with ``|``)

Usage:
    python -m search_howto.data_import [path/to/hotels.csv]
"""

import csv
import sys
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from azure.cosmos import CosmosClient
from azure.identity import DefaultAzureCredential

from .config import ConfigurationError, Settings, exit_on_configuration_error, load_settings, require
from .hotels import Hotel, parse_datetime, sample_hotels


def get_cosmos_container(settings: Settings):
    """
    Connect to the hotels container with managed identity.

    Raises:
        azure.core.exceptions.ClientAuthenticationError: If authentication fails
        azure.cosmos.exceptions.CosmosHttpResponseError: If the container doesn't exist
    """
    credential = DefaultAzureCredential()
    client = CosmosClient(url=settings.cosmos_endpoint, credential=credential)
    database = client.get_database_client(settings.database_name)
    return database.get_container_client(settings.container_name)


def to_cosmos_item(hotel: Hotel) -> Dict[str, Any]:
    # Cosmos DB needs an "id"; the indexer maps hotelId to the index key
    item = hotel.to_document()
    item["id"] = hotel.hotel_id
    return item


def import_hotels(container, hotels: Iterable[Hotel]) -> int:
    count = 0
    for hotel in hotels:
        container.upsert_item(to_cosmos_item(hotel))
        count += 1
        if count % 100 == 0:
            print(f"Upserted {count} documents...")

    print(f"✅ Done. Total documents upserted: {count}")
    return count


def _text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def _float(value: Optional[str]) -> Optional[float]:
    value = _text(value)
    return float(value) if value is not None else None


def _int(value: Optional[str]) -> Optional[int]:
    value = _text(value)
    return int(value) if value is not None else None


def _bool(value: Optional[str]) -> Optional[bool]:
    value = _text(value)
    if value is None:
        return None
    return value.lower() in ("true", "yes", "1")


def _date(value: Optional[str]) -> Optional[datetime]:
    return parse_datetime(_text(value))


def load_hotels_csv(csv_path: str) -> List[Hotel]:
    """Read flat hotels from a CSV file; rows without a hotelId are skipped."""
    hotels = []
    with open(csv_path, newline="", encoding="utf-8") as f:
        for row in csv.DictReader(f):
            hotel_id = _text(row.get("hotelId"))
            if hotel_id is None:
                continue
            tags = _text(row.get("tags"))
            hotels.append(
                Hotel(
                    hotel_id=hotel_id,
                    hotel_name=_text(row.get("hotelName")),
                    category=_text(row.get("category")),
                    base_rate=_float(row.get("baseRate")),
                    rating=_int(row.get("rating")),
                    parking_included=_bool(row.get("parkingIncluded")),
                    smoking_allowed=_bool(row.get("smokingAllowed")),
                    last_renovation_date=_date(row.get("lastRenovationDate")),
                    tags=[t.strip() for t in tags.split("|")] if tags else [],
                    description=_text(row.get("description")),
                )
            )
    return hotels


def main(argv: Optional[List[str]] = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    try:
        settings = load_settings()
        require(settings, "cosmos_endpoint")
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    if argv:
        print(f"Using CSV: {argv[0]}")
        hotels = load_hotels_csv(argv[0])
    else:
        hotels = sample_hotels()

    import_hotels(get_cosmos_container(settings), hotels)


if __name__ == "__main__":
    main()
