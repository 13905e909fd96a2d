"""
Azure AI Search how-to samples.

Each module in this package is a small console program that shows one
Azure AI Search client operation: creating and deleting indexes, uploading
documents, querying, optimistic concurrency with ETags, synonym maps,
customer-managed encryption keys, indexers and security trimming with
Microsoft Graph group membership.
"""

__version__ = "0.1.0"
