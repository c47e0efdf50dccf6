"""Asana SDK for Python.

Typed, declarative access to the Asana REST API: declare a Model with a
resource path and fields, then fetch it with get(), list() or from_().

Public API:
    AsanaClient - Synchronous client
    AsyncAsanaClient - Asynchronous client
    Model, model - Entity declaration
"""

from asana_sdk._version import __version__
from asana_sdk.client import AsanaClient, AsyncAsanaClient, AsyncScopedQuery, ScopedQuery
from asana_sdk.exceptions import (
    AsanaAPIError,
    AsanaConfigError,
    AsanaError,
    AsanaTransportError,
    AsanaValidationError,
)
from asana_sdk.models import Model, model

__all__ = [
    "__version__",
    "AsanaClient",
    "AsyncAsanaClient",
    "ScopedQuery",
    "AsyncScopedQuery",
    "Model",
    "model",
    "AsanaError",
    "AsanaAPIError",
    "AsanaTransportError",
    "AsanaConfigError",
    "AsanaValidationError",
]
