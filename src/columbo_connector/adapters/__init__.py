"""
Adapters for the external collaborators of the connector: the Columbo HTTP
API and the credential property store.
"""

from .base import AdapterError, CredentialError, DataSourceAdapter, RequestError, ServiceCommunicationError, VerificationResult
from .credentials import CredentialStore, CredentialStoreError, InMemoryCredentialStore, JsonFileCredentialStore

__all__ = [
    "AdapterError",
    "CredentialError",
    "CredentialStore",
    "CredentialStoreError",
    "DataSourceAdapter",
    "InMemoryCredentialStore",
    "JsonFileCredentialStore",
    "RequestError",
    "ServiceCommunicationError",
    "VerificationResult",
]
