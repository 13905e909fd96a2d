"""
Customer-managed encryption keys.

Creates a synonym map and an index encrypted with a key stored in Azure Key
Vault. The key is given as its full identifier, for example::

    https://<key-vault-name>.vault.azure.net/keys/<key-name>/<key-version>

Optionally an Azure AD application id and secret are attached so the search
service can reach the vault without a managed identity.

Usage:
    python -m search_howto.encryption
"""

from typing import Optional
from urllib.parse import urlparse

from azure.search.documents import SearchClient
from azure.search.documents.indexes import SearchIndexClient
from azure.search.documents.indexes.models import SearchResourceEncryptionKey

from .clients import get_index_client, get_search_client
from .config import ConfigurationError, Settings, exit_on_configuration_error, load_settings, require
from .documents import upload_documents
from .hotels import HOTELS_INDEX_NAME, sample_hotels
from .synonyms import (
    cleanup_resources,
    create_hotels_index,
    run_queries_with_nonexistent_terms,
    upload_synonyms,
)

KEY_IDENTIFIER_FORMAT = "https://<key-vault-name>.vault.azure.net/keys/<key-name>/<key-version>"


def parse_encryption_key(
    key_identifier: str,
    application_id: Optional[str] = None,
    application_secret: Optional[str] = None,
) -> SearchResourceEncryptionKey:
    """
    Build an encryption key definition from a Key Vault key identifier.

    Args:
        key_identifier: Full key URI including the key version.
        application_id: Azure AD application used to access the vault.
        application_secret: Secret for ``application_id``.

    Returns:
        SearchResourceEncryptionKey: Vault URI, key name and version, plus
        access credentials when an application id is given.

    Raises:
        ValueError: If the identifier is not a versioned Key Vault key URI.
    """
    parsed = urlparse(key_identifier or "")
    segments = [s for s in parsed.path.split("/") if s]
    host = parsed.hostname or ""
    if "vault.azure.net" not in host or len(segments) != 3 or segments[0] != "keys":
        raise ValueError(
            f"Invalid 'AZURE_KEY_VAULT_KEY_IDENTIFIER' - Expected format: '{KEY_IDENTIFIER_FORMAT}'"
        )

    kwargs = {}
    if application_id and application_id.strip():
        kwargs["application_id"] = application_id
        kwargs["application_secret"] = application_secret

    return SearchResourceEncryptionKey(
        key_name=segments[1],
        key_version=segments[2],
        vault_uri=f"{parsed.scheme}://{host}",
        **kwargs,
    )


def encryption_key_from_settings(settings: Settings) -> SearchResourceEncryptionKey:
    require(settings, "key_vault_key_identifier")
    return parse_encryption_key(
        settings.key_vault_key_identifier,
        settings.aad_application_id,
        settings.aad_application_secret,
    )


def run_encryption_demo(
    index_client: SearchIndexClient,
    admin_search_client: SearchClient,
    query_client: SearchClient,
    encryption_key: SearchResourceEncryptionKey,
    **upload_kwargs,
) -> None:
    print("Cleaning up resources...\n")
    cleanup_resources(index_client)

    print("Creating synonym-map encrypted with customer managed key...\n")
    upload_synonyms(index_client, encryption_key=encryption_key)

    print("Creating index encrypted with customer managed key...\n")
    create_hotels_index(index_client, encryption_key=encryption_key)

    print("Uploading documents...\n")
    upload_documents(admin_search_client, [h.to_document() for h in sample_hotels()], **upload_kwargs)

    run_queries_with_nonexistent_terms(
        query_client,
        queries=['"five star"', "internet", "economy AND hotel"],
    )


def main() -> None:
    try:
        settings = load_settings()
        encryption_key = encryption_key_from_settings(settings)
        index_client = get_index_client(settings)
        admin_search_client = get_search_client(settings, HOTELS_INDEX_NAME, use_query_key=False)
        query_client = get_search_client(settings, HOTELS_INDEX_NAME)
    except ConfigurationError as e:
        exit_on_configuration_error(e)
        return
    except ValueError as e:
        print(f"❌ Error: {e}")
        raise SystemExit(1)

    run_encryption_demo(index_client, admin_search_client, query_client, encryption_key)
    print("Complete.\n")


if __name__ == "__main__":
    main()
