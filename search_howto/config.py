"""
Settings loader for the Azure AI Search samples.

Values are read from environment variables, after loading a ``.env`` file
with python-dotenv. See ``.env.example`` for every recognised key.
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

PLACEHOLDER_PREFIX = "Put your"


class ConfigurationError(Exception):
    """Raised when a required setting is missing or still a placeholder."""


@dataclass(frozen=True)
class Settings:
    service_name: Optional[str] = None
    endpoint: Optional[str] = None
    admin_key: Optional[str] = None
    query_key: Optional[str] = None
    sql_connection_string: Optional[str] = None
    cosmos_connection_string: Optional[str] = None
    storage_connection_string: Optional[str] = None
    usgs_connection_string: Optional[str] = None
    key_vault_key_identifier: Optional[str] = None
    aad_application_id: Optional[str] = None
    aad_application_secret: Optional[str] = None
    graph_client_id: Optional[str] = None
    graph_tenant: Optional[str] = None
    graph_user_password: Optional[str] = None
    cosmos_endpoint: Optional[str] = None
    database_name: str = "hotels-db"
    container_name: str = "hotels"


# Settings attribute -> environment variable
ENV_KEYS = {
    "service_name": "AZURE_SEARCH_SERVICE_NAME",
    "endpoint": "AZURE_SEARCH_ENDPOINT",
    "admin_key": "AZURE_SEARCH_ADMIN_KEY",
    "query_key": "AZURE_SEARCH_QUERY_KEY",
    "sql_connection_string": "AZURE_SQL_CONNECTION_STRING",
    "cosmos_connection_string": "COSMOS_DB_CONNECTION_STRING",
    "storage_connection_string": "AZURE_STORAGE_CONNECTION_STRING",
    "usgs_connection_string": "USGS_SQL_CONNECTION_STRING",
    "key_vault_key_identifier": "AZURE_KEY_VAULT_KEY_IDENTIFIER",
    "aad_application_id": "AZURE_AD_APPLICATION_ID",
    "aad_application_secret": "AZURE_AD_APPLICATION_SECRET",
    "graph_client_id": "GRAPH_CLIENT_ID",
    "graph_tenant": "GRAPH_TENANT",
    "graph_user_password": "GRAPH_USER_PASSWORD",
    "cosmos_endpoint": "COSMOS_ENDPOINT",
    "database_name": "DATABASE_NAME",
    "container_name": "CONTAINER_NAME",
}


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load settings from the environment.

    Args:
        env_file: Optional path to a ``.env`` file. When omitted, python-dotenv
            searches the working directory and its parents.

    Returns:
        Settings: Populated settings. Empty strings are treated as unset.
    """
    load_dotenv(dotenv_path=env_file)

    values = {}
    for attr, env_name in ENV_KEYS.items():
        value = os.getenv(env_name)
        if value is not None and value.strip():
            values[attr] = value.strip()
    return Settings(**values)


def is_placeholder(value: Optional[str]) -> bool:
    return value is None or value.startswith(PLACEHOLDER_PREFIX)


def require(settings: Settings, *names: str) -> None:
    """
    Check that the named settings are present and not placeholders.

    Raises:
        ConfigurationError: Naming the first offending environment variable.
    """
    for name in names:
        if is_placeholder(getattr(settings, name)):
            raise ConfigurationError(f"Specify {ENV_KEYS[name]} in .env")


def search_endpoint(settings: Settings) -> str:
    """Return the service endpoint, deriving it from the service name if needed."""
    if settings.endpoint:
        return settings.endpoint.rstrip("/")
    if is_placeholder(settings.service_name):
        raise ConfigurationError(
            f"Specify {ENV_KEYS['endpoint']} or {ENV_KEYS['service_name']} in .env"
        )
    return f"https://{settings.service_name}.search.windows.net"


def exit_on_configuration_error(error: ConfigurationError) -> None:
    print(f"❌ Error: {error}", file=sys.stderr)
    sys.exit(1)


def require_query_access(settings: Settings) -> None:
    """
    Check that queries can be sent: an endpoint plus a query or admin key.

    Raises:
        ConfigurationError: If either is missing.
    """
    search_endpoint(settings)
    if is_placeholder(settings.query_key) and is_placeholder(settings.admin_key):
        raise ConfigurationError(f"Specify {ENV_KEYS['query_key']} or {ENV_KEYS['admin_key']} in .env")
