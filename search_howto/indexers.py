"""
Indexer how-tos: pull hotels from Azure SQL, Cosmos DB and Table Storage.

The indexers run inside the search service. This module only defines the
data sources (including their change and deletion detection policies),
creates indexers on a daily schedule and asks the service to run them once
right away.

Usage:
    python -m search_howto.indexers                  # Azure SQL only
    search-howto-multiple-data-sources               # SQL + Cosmos DB (+ tables)
"""

from datetime import timedelta
from typing import Iterable, List, Optional

from azure.core.exceptions import HttpResponseError
from azure.search.documents.indexes import SearchIndexClient, SearchIndexerClient
from azure.search.documents.indexes.models import (
    HighWaterMarkChangeDetectionPolicy,
    IndexingSchedule,
    SearchIndex,
    SearchIndexer,
    SearchIndexerDataContainer,
    SearchIndexerDataSourceConnection,
    SearchIndexerDataSourceType,
    SoftDeleteColumnDeletionDetectionPolicy,
    SqlIntegratedChangeTrackingPolicy,
)

from .clients import get_index_client, get_indexer_client
from .config import (
    ConfigurationError,
    exit_on_configuration_error,
    is_placeholder,
    load_settings,
    require,
)
from .documents import delete_index_if_exists
from .hotels import HOTELS_INDEX_NAME, hotel_fields

# All sample data sets use a table/collection named "hotels"
SOURCE_CONTAINER_NAME = "hotels"

SQL_DATA_SOURCE_NAME = "azure-sql"
COSMOS_DATA_SOURCE_NAME = "cosmos-db"
TABLE_DATA_SOURCE_NAME = "azure-table"

SQL_INDEXER_NAME = "azure-sql-indexer"
COSMOS_INDEXER_NAME = "cosmos-db-indexer"
TABLE_INDEXER_NAME = "azure-table-indexer"

INDEXER_SCHEDULE = IndexingSchedule(interval=timedelta(days=1))

TOO_MANY_REQUESTS = 429


def recreate_hotels_index(index_client: SearchIndexClient, include_location: bool = False) -> SearchIndex:
    """
    Drop and recreate the target index so a rerun starts from empty.

    The single-source SQL sample has no geography column, so ``location``
    is left out unless ``include_location`` is set. The multiple-source
    sample keeps it for the Cosmos DB documents.
    """
    delete_index_if_exists(index_client, HOTELS_INDEX_NAME)
    definition = SearchIndex(name=HOTELS_INDEX_NAME, fields=hotel_fields(include_location=include_location))
    return index_client.create_index(definition)


def create_sql_data_source(
    indexer_client: SearchIndexerClient,
    connection_string: str,
    soft_delete: bool = True,
) -> SearchIndexerDataSourceConnection:
    """
    Define the Azure SQL data source.

    SQL integrated change tracking lets the indexer pick up only the rows
    changed since its last run. With ``soft_delete``, rows whose
    ``IsDeleted`` column is ``true`` are removed from the index.
    """
    data_source = SearchIndexerDataSourceConnection(
        name=SQL_DATA_SOURCE_NAME,
        type=SearchIndexerDataSourceType.AZURE_SQL,
        connection_string=connection_string,
        container=SearchIndexerDataContainer(name=SOURCE_CONTAINER_NAME),
        data_change_detection_policy=SqlIntegratedChangeTrackingPolicy(),
    )
    if soft_delete:
        data_source.data_deletion_detection_policy = SoftDeleteColumnDeletionDetectionPolicy(
            soft_delete_column_name="IsDeleted",
            soft_delete_marker_value="true",
        )
    # Create-or-update, so a changed connection string is picked up on rerun
    return indexer_client.create_or_update_data_source_connection(data_source)


def create_cosmos_data_source(
    indexer_client: SearchIndexerClient,
    connection_string: str,
) -> SearchIndexerDataSourceConnection:
    # Cosmos DB change tracking is driven by the _ts system property
    data_source = SearchIndexerDataSourceConnection(
        name=COSMOS_DATA_SOURCE_NAME,
        type=SearchIndexerDataSourceType.COSMOS_DB,
        connection_string=connection_string,
        container=SearchIndexerDataContainer(name=SOURCE_CONTAINER_NAME),
        data_change_detection_policy=HighWaterMarkChangeDetectionPolicy(high_water_mark_column_name="_ts"),
    )
    return indexer_client.create_or_update_data_source_connection(data_source)


def create_table_data_source(
    indexer_client: SearchIndexerClient,
    connection_string: str,
) -> SearchIndexerDataSourceConnection:
    data_source = SearchIndexerDataSourceConnection(
        name=TABLE_DATA_SOURCE_NAME,
        type=SearchIndexerDataSourceType.AZURE_TABLE,
        connection_string=connection_string,
        container=SearchIndexerDataContainer(name=SOURCE_CONTAINER_NAME),
        data_change_detection_policy=HighWaterMarkChangeDetectionPolicy(high_water_mark_column_name="Timestamp"),
    )
    return indexer_client.create_or_update_data_source_connection(data_source)


def create_or_reset_indexer(
    indexer_client: SearchIndexerClient,
    name: str,
    data_source_name: str,
    target_index_name: str = HOTELS_INDEX_NAME,
) -> SearchIndexer:
    """
    Create an indexer on a daily schedule.

    An indexer remembers how far it got. If it already exists it is reset
    first, otherwise a rerun of the sample would index nothing.
    """
    indexer = SearchIndexer(
        name=name,
        data_source_name=data_source_name,
        target_index_name=target_index_name,
        schedule=INDEXER_SCHEDULE,
    )
    if name in indexer_client.get_indexer_names():
        indexer_client.reset_indexer(name)
    return indexer_client.create_or_update_indexer(indexer)


def run_indexers(indexer_client: SearchIndexerClient, names: Iterable[str]) -> List[str]:
    """
    Ask the service to run each indexer now.

    Throttled requests (HTTP 429) are reported and skipped. Any other
    service error propagates.

    Returns:
        List[str]: Names of the indexers that were started.
    """
    started = []
    for name in names:
        try:
            indexer_client.run_indexer(name)
            started.append(name)
        except HttpResponseError as e:
            if e.status_code != TOO_MANY_REQUESTS:
                raise
            print(f"Failed to run indexer: {e.message}")
    return started


def run_sql_indexer_demo(
    index_client: SearchIndexClient,
    indexer_client: SearchIndexerClient,
    sql_connection_string: str,
) -> List[str]:
    print("Creating index...")
    index = recreate_hotels_index(index_client)

    print("Creating data source...")
    data_source = create_sql_data_source(indexer_client, sql_connection_string)

    print("Creating Azure SQL indexer...")
    indexer = create_or_reset_indexer(indexer_client, SQL_INDEXER_NAME, data_source.name, index.name)

    # Scheduled daily, but also run it immediately
    print("Running Azure SQL indexer...")
    return run_indexers(indexer_client, [indexer.name])


def run_multiple_data_sources_demo(
    index_client: SearchIndexClient,
    indexer_client: SearchIndexerClient,
    sql_connection_string: str,
    cosmos_connection_string: str,
    storage_connection_string: Optional[str] = None,
) -> List[str]:
    """Fill one index from several sources, each with its own indexer."""
    print("Creating index...")
    index = recreate_hotels_index(index_client, include_location=True)

    print("Creating data sources...")
    sources = [
        (SQL_INDEXER_NAME, "Azure SQL",
         create_sql_data_source(indexer_client, sql_connection_string, soft_delete=False)),
        (COSMOS_INDEXER_NAME, "Cosmos DB",
         create_cosmos_data_source(indexer_client, cosmos_connection_string)),
    ]
    if storage_connection_string:
        sources.append(
            (TABLE_INDEXER_NAME, "Azure Table Storage",
             create_table_data_source(indexer_client, storage_connection_string))
        )

    names = []
    for indexer_name, label, data_source in sources:
        print(f"Creating {label} indexer...")
        indexer = create_or_reset_indexer(indexer_client, indexer_name, data_source.name, index.name)
        names.append(indexer.name)

    print(f"Running {' and '.join(label for _, label, _ in sources)} indexers...")
    return run_indexers(indexer_client, names)


def main() -> None:
    try:
        settings = load_settings()
        require(settings, "admin_key", "sql_connection_string")
        index_client = get_index_client(settings)
        indexer_client = get_indexer_client(settings)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    run_sql_indexer_demo(index_client, indexer_client, settings.sql_connection_string)
    print("Complete.\n")


def main_multiple_data_sources() -> None:
    try:
        settings = load_settings()
        require(settings, "admin_key", "sql_connection_string", "cosmos_connection_string")
        index_client = get_index_client(settings)
        indexer_client = get_indexer_client(settings)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return

    storage = settings.storage_connection_string
    run_multiple_data_sources_demo(
        index_client,
        indexer_client,
        settings.sql_connection_string,
        settings.cosmos_connection_string,
        None if is_placeholder(storage) else storage,
    )
    print("Complete.\n")


if __name__ == "__main__":
    main()
