"""Request documents for catalog operations.

One builder covers the three creation modes (plain, publish, subscribe); the
mode only decides which block gets attached under the AdminCatalog root. A
separate builder produces the standalone document used to change publish
settings on an existing catalog.
"""

from __future__ import annotations

import xml.etree.ElementTree as ET
from typing import Dict, Optional

from .models import (
    CatalogSpec,
    Publish,
    PublishSettings,
    StorageProfileRef,
    Subscribe,
    SubscriptionSettings,
)

VCLOUD_NS = "http://www.vmware.com/vcloud/v1.5"

CATALOG_CONTENT_TYPE = "application/vnd.vmware.admin.catalog+xml"
# The platform spells the media type with a capital P in Params.
PUBLISH_CONTENT_TYPE = "application/vnd.vmware.admin.publishExternalCatalogParams+xml"
STORAGE_PROFILE_TYPE = "application/vnd.vmware.vcloud.vdcStorageProfile+xml"


def _q(tag: str) -> str:
    return f"{{{VCLOUD_NS}}}{tag}"


def _flag(value: bool) -> str:
    return "true" if value else "false"


def _text(parent: ET.Element, tag: str, value: str) -> ET.Element:
    el = ET.SubElement(parent, tag)
    el.text = value
    return el


def _serialize(root: ET.Element) -> bytes:
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def _publish_block(parent: ET.Element, settings: PublishSettings) -> ET.Element:
    block = ET.SubElement(parent, "PublishExternalCatalogParams")
    _text(block, "IsPublishedExternally", _flag(settings.published_externally))
    if settings.password:
        _text(block, "Password", settings.password)
    _text(block, "IsCacheEnabled", _flag(settings.cache_enabled))
    _text(block, "PreserveIdentityInfoFlag", _flag(settings.preserve_identity_info))
    return block


def _subscription_block(parent: ET.Element, settings: SubscriptionSettings) -> ET.Element:
    block = ET.SubElement(parent, "ExternalCatalogSubscriptionParams")
    _text(block, "SubscribeToExternalFeeds", _flag(settings.subscribe_to_external_feed))
    _text(block, "Location", settings.source_url)
    if settings.password:
        _text(block, "Password", settings.password)
    _text(block, "LocalCopy", _flag(settings.keep_local_copy))
    return block


def build_catalog_document(spec: CatalogSpec, storage_profile: Optional[StorageProfileRef] = None) -> bytes:
    """Build the AdminCatalog document POSTed to an org's /catalogs endpoint."""
    root = ET.Element("AdminCatalog", {"xmlns": VCLOUD_NS, "name": spec.name})
    _text(root, "Description", spec.description or "")

    mode = spec.mode
    if isinstance(mode, Publish):
        _publish_block(root, mode.settings)
    elif isinstance(mode, Subscribe):
        _subscription_block(root, mode.settings)

    if storage_profile is not None:
        profiles = ET.SubElement(root, "CatalogStorageProfiles")
        ET.SubElement(
            profiles,
            "VdcStorageProfile",
            {"href": storage_profile.href, "name": storage_profile.name, "type": STORAGE_PROFILE_TYPE},
        )

    return _serialize(root)


def build_publish_document(settings: PublishSettings) -> bytes:
    """Build the document for publishToExternalOrganizations on an existing catalog."""
    root = ET.Element("PublishExternalCatalogParams", {"xmlns": VCLOUD_NS})
    _text(root, "IsPublishedExternally", _flag(settings.published_externally))
    if settings.password:
        _text(root, "Password", settings.password)
    return _serialize(root)


def parse_catalog_document(data: bytes) -> Dict[str, object]:
    """Read a built document back into a flat dict.

    Keys: root, name, description, mode ("plain", "publish", "subscribe" or
    "update"), fields (child tag -> text, in document order) and
    storage_profile_href.
    """
    root = ET.fromstring(data)
    if not root.tag.startswith(f"{{{VCLOUD_NS}}}"):
        raise ValueError(f"Unexpected namespace on root element: {root.tag}")
    local_root = root.tag.split("}", 1)[1]

    result: Dict[str, object] = {
        "root": local_root,
        "name": root.get("name", ""),
        "description": "",
        "mode": "plain",
        "fields": {},
        "storage_profile_href": None,
    }

    if local_root == "PublishExternalCatalogParams":
        result["mode"] = "update"
        result["fields"] = {child.tag.split("}", 1)[1]: child.text or "" for child in root}
        return result

    desc = root.find(_q("Description"))
    if desc is not None:
        result["description"] = desc.text or ""

    for tag, mode in (("PublishExternalCatalogParams", "publish"), ("ExternalCatalogSubscriptionParams", "subscribe")):
        block = root.find(_q(tag))
        if block is not None:
            result["mode"] = mode
            result["fields"] = {child.tag.split("}", 1)[1]: child.text or "" for child in block}

    profile = root.find(f"{_q('CatalogStorageProfiles')}/{_q('VdcStorageProfile')}")
    if profile is not None:
        result["storage_profile_href"] = profile.get("href")

    return result
