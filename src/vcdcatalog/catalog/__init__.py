"""Catalog module for vcdcatalog.

Creates, publishes and subscribes vCloud catalogs and reports their state.
This module handles:
- Request documents for each catalog mode
- Storage profile lookup across an organization's VDCs
- Session and organization checks before any change
- Interpreting a new catalog's task list
"""

from .builder import build_catalog_document, build_publish_document, parse_catalog_document
from .client import VcdClient
from .errors import (
    CatalogError,
    CatalogNotFoundError,
    CreatedStatusUnknownError,
    MalformedResultError,
    NoSessionError,
    OrgNotFoundError,
    RemoteCallError,
    StorageProfileNotMatched,
)
from .models import (
    CatalogResult,
    CatalogSpec,
    Outcome,
    Plain,
    Publish,
    PublishSettings,
    StorageProfileRef,
    Subscribe,
    SubscriptionSettings,
    SyncOutcome,
)
from .orchestrator import CatalogOrchestrator
from .outcome import interpret_tasks
from .preconditions import check_preconditions
from .resolver import resolve_storage_profile
from .session import Session, SessionProvider

__all__ = [
    "CatalogOrchestrator",
    "CatalogResult",
    "CatalogSpec",
    "Outcome",
    "Plain",
    "Publish",
    "PublishSettings",
    "StorageProfileRef",
    "Subscribe",
    "SubscriptionSettings",
    "SyncOutcome",
    "Session",
    "SessionProvider",
    "VcdClient",
    "CatalogError",
    "CatalogNotFoundError",
    "CreatedStatusUnknownError",
    "MalformedResultError",
    "NoSessionError",
    "OrgNotFoundError",
    "RemoteCallError",
    "StorageProfileNotMatched",
    "build_catalog_document",
    "build_publish_document",
    "parse_catalog_document",
    "check_preconditions",
    "interpret_tasks",
    "resolve_storage_profile",
]
