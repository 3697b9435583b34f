"""Shared fixtures: an in-memory stand-in for VcdClient."""

from typing import Dict, List, Optional

import pytest

from vcdcatalog.catalog.models import AdminCatalog, Org, StorageProfile, Task, Vdc
from vcdcatalog.catalog.session import Session, SessionProvider
from vcdcatalog.config import Settings

HOST = "cloud.example.com"


class FakeClient:
    """Records every call and answers lookups from plain dicts.

    `catalogs_after_post` holds the catalog states returned by successive
    get_catalog calls once a POST has been made.
    """

    def __init__(
        self,
        orgs: Optional[Dict[str, Org]] = None,
        vdcs: Optional[List[Vdc]] = None,
        catalogs: Optional[Dict[str, AdminCatalog]] = None,
        catalogs_after_post: Optional[List[Optional[AdminCatalog]]] = None,
    ):
        self.orgs = orgs if orgs is not None else {"Acme": Org("Acme", f"https://{HOST}/api/org/acme-id")}
        self.vdcs = vdcs or []
        self.catalogs = catalogs or {}
        self.catalogs_after_post = list(catalogs_after_post or [])
        self.calls: List[tuple] = []
        self.posts: List[tuple] = []
        self.refetch_error: Optional[Exception] = None

    def get_org(self, name):
        self.calls.append(("get_org", name))
        return self.orgs.get(name)

    def get_org_vdcs(self, org):
        self.calls.append(("get_org_vdcs", org.name))
        return self.vdcs

    def get_catalog(self, name, org):
        self.calls.append(("get_catalog", name))
        if self.posts:
            if self.refetch_error is not None:
                raise self.refetch_error
            if self.catalogs_after_post:
                state = self.catalogs_after_post[0]
                if len(self.catalogs_after_post) > 1:
                    self.catalogs_after_post.pop(0)
                return state
        return self.catalogs.get(name)

    def post(self, uri, content_type, body):
        self.calls.append(("post", uri))
        self.posts.append((uri, content_type, body))
        return ""


def make_vdc(name: str, *profiles: str) -> Vdc:
    return Vdc(
        name=name,
        href=f"https://{HOST}/api/vdc/{name}",
        storage_profiles=[
            StorageProfile(name=p, href=f"https://{HOST}/api/vdcStorageProfile/{name}-{p}") for p in profiles
        ],
    )


def make_catalog(name: str = "Test", published_url: str = "", tasks=None) -> AdminCatalog:
    return AdminCatalog(
        name=name,
        href=f"https://{HOST}/api/admin/catalog/{name.lower()}-id",
        published_url=published_url,
        is_published=bool(published_url),
        tasks=list(tasks or []),
    )


def running_task() -> Task:
    return Task(status="running", operation="Syncing catalog")


@pytest.fixture
def sessions():
    return SessionProvider([Session(HOST, "token-123")])


@pytest.fixture
def settings():
    return Settings(refetch_attempts=1, refetch_delay_s=0.0)
