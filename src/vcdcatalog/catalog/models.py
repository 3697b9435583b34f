"""Catalog data model.

Request values (specs and settings), parsed read-models returned by the
directory lookups, and the result/outcome types handed back to callers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Literal, Optional, Tuple, Union


@dataclass(frozen=True)
class PublishSettings:
    """External publication settings for a catalog."""
    published_externally: bool = True
    password: Optional[str] = None
    cache_enabled: bool = False
    preserve_identity_info: bool = False


@dataclass(frozen=True)
class SubscriptionSettings:
    """Settings for subscribing a catalog to an external feed."""
    source_url: str
    password: Optional[str] = None
    subscribe_to_external_feed: bool = True
    keep_local_copy: bool = True


@dataclass(frozen=True)
class Plain:
    kind: Literal["plain"] = "plain"


@dataclass(frozen=True)
class Publish:
    settings: PublishSettings
    kind: Literal["publish"] = "publish"


@dataclass(frozen=True)
class Subscribe:
    settings: SubscriptionSettings
    kind: Literal["subscribe"] = "subscribe"


CreationMode = Union[Plain, Publish, Subscribe]


@dataclass(frozen=True)
class CatalogSpec:
    """What the caller wants created.

    The mode is a single tagged value, so a spec can carry publish settings or
    subscription settings but never both.
    """
    name: str
    org: str
    description: str = ""
    storage_profile: str = ""
    mode: CreationMode = field(default_factory=Plain)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Catalog name is required")
        if not self.org:
            raise ValueError("Organization name is required")

    @classmethod
    def for_publish(cls, name: str, org: str, settings: Optional[PublishSettings] = None,
                    **kwargs) -> "CatalogSpec":
        mode: CreationMode = Publish(settings) if settings is not None else Plain()
        return cls(name=name, org=org, mode=mode, **kwargs)

    @classmethod
    def for_subscription(cls, name: str, org: str, settings: SubscriptionSettings,
                         **kwargs) -> "CatalogSpec":
        return cls(name=name, org=org, mode=Subscribe(settings), **kwargs)


# --- Read-models parsed from the platform ---

@dataclass(frozen=True)
class StorageProfile:
    name: str
    href: str


@dataclass(frozen=True)
class StorageProfileRef:
    """A storage profile resolved to its href, plus the VDC that offered it."""
    name: str
    href: str
    vdc_name: str = ""


@dataclass
class Org:
    name: str
    href: str

    @property
    def admin_href(self) -> str:
        """Admin view of the org, which owns the /catalogs endpoint."""
        if "/api/admin/org/" in self.href:
            return self.href
        return self.href.replace("/api/org/", "/api/admin/org/", 1)


@dataclass
class Vdc:
    name: str
    href: str
    storage_profiles: List[StorageProfile] = field(default_factory=list)


@dataclass(frozen=True)
class Task:
    status: str
    operation: str = ""
    error_message: str = ""


@dataclass
class AdminCatalog:
    name: str
    href: str
    published_url: str = ""
    is_published: bool = False
    is_subscribed: bool = False
    tasks: List[Task] = field(default_factory=list)

    @property
    def publish_action_href(self) -> str:
        return self.href.rstrip("/") + "/action/publishToExternalOrganizations"


# --- Results ---

class SyncOutcome(str, Enum):
    """Interpreted state of a subscribed catalog's initial sync."""
    SUCCESS = "success"
    IN_PROGRESS = "in-progress"
    ERROR = "error"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class Outcome:
    status: SyncOutcome
    detail: str = ""

    @classmethod
    def success(cls) -> "Outcome":
        return cls(SyncOutcome.SUCCESS)

    @classmethod
    def in_progress(cls, message: str = "") -> "Outcome":
        return cls(SyncOutcome.IN_PROGRESS, message)

    @classmethod
    def error(cls, detail: str) -> "Outcome":
        return cls(SyncOutcome.ERROR, detail)

    @classmethod
    def unknown(cls, raw: str = "") -> "Outcome":
        return cls(SyncOutcome.UNKNOWN, raw)


@dataclass(frozen=True)
class CatalogResult:
    """What a catalog operation hands back to its caller."""
    catalog_name: str
    org: str
    host: str
    published_url: Optional[str] = None
    outcome: Optional[Outcome] = None
    warnings: Tuple[str, ...] = ()

    @property
    def ok(self) -> bool:
        if self.published_url:
            return True
        if self.outcome is None:
            return False
        return self.outcome.status in (SyncOutcome.SUCCESS, SyncOutcome.IN_PROGRESS)

    def to_dict(self) -> dict:
        return {
            "catalog_name": self.catalog_name,
            "org": self.org,
            "host": self.host,
            "published_url": self.published_url,
            "outcome": self.outcome.status.value if self.outcome else None,
            "detail": self.outcome.detail if self.outcome else "",
            "warnings": list(self.warnings),
        }
