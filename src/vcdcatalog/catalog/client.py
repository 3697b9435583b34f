"""REST client for the vCloud API.

Carries the authenticated HTTP exchange (invoke) and the read-only directory
lookups the catalog flows need: organizations, their VDCs with storage
profiles, and admin catalogs. Responses are XML under the vcloud/v1.5
namespace and are parsed into the read-models in models.py.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from typing import List, Optional

import requests

from ..config import Settings
from .builder import VCLOUD_NS
from .errors import MalformedResultError, RemoteCallError
from .models import AdminCatalog, Org, StorageProfile, Task, Vdc
from .session import Session

logger = logging.getLogger(__name__)

ORG_TYPE = "application/vnd.vmware.vcloud.org+xml"
VDC_TYPE = "application/vnd.vmware.vcloud.vdc+xml"
CATALOG_TYPE = "application/vnd.vmware.vcloud.catalog+xml"
ADMIN_CATALOG_TYPE = "application/vnd.vmware.admin.catalog+xml"


def _q(tag: str) -> str:
    return f"{{{VCLOUD_NS}}}{tag}"


def _child_text(el: ET.Element, path: str) -> str:
    found = el.find(path)
    if found is None or found.text is None:
        return ""
    return found.text.strip()


def admin_catalog_href(href: str) -> str:
    """Map a user-view catalog href onto its admin view."""
    if "/api/admin/catalog/" in href:
        return href
    return href.replace("/api/catalog/", "/api/admin/catalog/", 1)


def parse_tasks(root: ET.Element) -> List[Task]:
    tasks = []
    for el in root.findall(f"{_q('Tasks')}/{_q('Task')}"):
        error = el.find(_q("Error"))
        tasks.append(
            Task(
                status=el.get("status", ""),
                operation=el.get("operation", el.get("operationName", "")),
                error_message=error.get("message", "") if error is not None else "",
            )
        )
    return tasks


def parse_admin_catalog(root: ET.Element) -> AdminCatalog:
    name = root.get("name", "")
    href = root.get("href", "")
    if not href:
        raise MalformedResultError("href", name)

    publish = root.find(_q("PublishExternalCatalogParams"))
    subscribe = root.find(_q("ExternalCatalogSubscriptionParams"))

    published_url = ""
    is_published = False
    if publish is not None:
        published_url = _child_text(publish, _q("CatalogPublishedUrl"))
        is_published = _child_text(publish, _q("IsPublishedExternally")).lower() == "true"

    is_subscribed = False
    if subscribe is not None:
        is_subscribed = _child_text(subscribe, _q("SubscribeToExternalFeeds")).lower() == "true"

    return AdminCatalog(
        name=name,
        href=href,
        published_url=published_url,
        is_published=is_published,
        is_subscribed=is_subscribed,
        tasks=parse_tasks(root),
    )


def parse_vdc(root: ET.Element) -> Vdc:
    profiles = [
        StorageProfile(name=el.get("name", ""), href=el.get("href", ""))
        for el in root.findall(f"{_q('VdcStorageProfiles')}/{_q('VdcStorageProfile')}")
    ]
    return Vdc(name=root.get("name", ""), href=root.get("href", ""), storage_profiles=profiles)


class VcdClient:
    """Client bound to one authenticated session.

    Every call reuses the session's token; the client never logs in or out.
    """

    def __init__(self, session: Session, settings: Optional[Settings] = None):
        self.session = session
        self.settings = settings or Settings()
        self._http = requests.Session()
        self._http.verify = self.settings.verify_ssl

    @property
    def api_version(self) -> str:
        return self.session.api_version or self.settings.api_version

    def _url(self, path: str) -> str:
        if "://" in path:
            return path
        return self.session.api_root.rstrip("/") + "/" + path.lstrip("/")

    def invoke(
        self,
        uri: str,
        token: str,
        content_type: Optional[str] = None,
        method: str = "GET",
        body: Optional[bytes] = None,
    ) -> str:
        """Perform one authenticated exchange and return the response text."""
        headers = {
            "x-vcloud-authorization": token,
            "Accept": f"application/*+xml;version={self.api_version}",
        }
        if content_type:
            headers["Content-Type"] = content_type

        logger.debug("%s %s", method, uri)
        try:
            response = self._http.request(
                method, uri, headers=headers, data=body, timeout=self.settings.timeout_s
            )
            response.raise_for_status()
            return response.text or ""
        except requests.exceptions.HTTPError as e:
            resp = e.response
            if resp is not None:
                raise RemoteCallError(resp.status_code, resp.text or str(e), uri, method) from e
            raise RemoteCallError(None, str(e), uri, method) from e
        except requests.exceptions.ConnectionError as e:
            raise RemoteCallError(None, f"Cannot connect to {self.session.host}", uri, method) from e
        except requests.exceptions.RequestException as e:
            raise RemoteCallError(None, str(e), uri, method) from e

    def _get_xml(self, path: str) -> ET.Element:
        uri = self._url(path)
        text = self.invoke(uri, self.session.token)
        try:
            return ET.fromstring(text)
        except ET.ParseError as e:
            raise RemoteCallError(None, f"Invalid XML response: {e}", uri, "GET") from e

    def post(self, uri: str, content_type: str, body: bytes) -> str:
        return self.invoke(self._url(uri), self.session.token, content_type, "POST", body)

    # --- Directory lookups ---

    def get_org(self, name: str) -> Optional[Org]:
        """Resolve an organization by exact name."""
        org_list = self._get_xml("/org")
        for el in org_list.findall(_q("Org")):
            if el.get("name") == name:
                return Org(name=name, href=el.get("href", ""))
        return None

    def _org_links(self, org: Org, link_type: str) -> List[ET.Element]:
        root = self._get_xml(org.href)
        return [
            link for link in root.findall(_q("Link"))
            if link.get("type") == link_type and link.get("rel", "down") == "down"
        ]

    def get_org_vdcs(self, org: Org) -> List[Vdc]:
        """Return the org's VDCs, in the order the platform lists them."""
        return [parse_vdc(self._get_xml(link.get("href", ""))) for link in self._org_links(org, VDC_TYPE)]

    def get_catalog(self, name: str, org: Org) -> Optional[AdminCatalog]:
        """Return the admin view of the org's catalog called `name`."""
        for link in self._org_links(org, CATALOG_TYPE):
            if link.get("name") == name:
                return parse_admin_catalog(self._get_xml(admin_catalog_href(link.get("href", ""))))
        return None
