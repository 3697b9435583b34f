"""Tests for the catalog request builder."""

import xml.etree.ElementTree as ET

import pytest

from vcdcatalog.catalog.builder import (
    PUBLISH_CONTENT_TYPE,
    VCLOUD_NS,
    build_catalog_document,
    build_publish_document,
    parse_catalog_document,
)
from vcdcatalog.catalog.models import (
    CatalogSpec,
    PublishSettings,
    StorageProfileRef,
    SubscriptionSettings,
)

NS = {"v": VCLOUD_NS}


def _block_names(data: bytes):
    root = ET.fromstring(data)
    return [child.tag.split("}", 1)[1] for child in root]


class TestCatalogSpec:
    """Tests for CatalogSpec construction."""

    def test_requires_name_and_org(self):
        """Test empty name or org is rejected."""
        with pytest.raises(ValueError, match="name"):
            CatalogSpec(name="", org="Acme")
        with pytest.raises(ValueError, match="Organization"):
            CatalogSpec(name="Test", org="")

    def test_for_publish_without_settings_is_plain(self):
        """Test no publish settings gives a plain spec."""
        spec = CatalogSpec.for_publish("Test", "Acme", None)
        assert spec.mode.kind == "plain"


class TestBuildCatalogDocument:
    """Tests for build_catalog_document."""

    def test_plain_document(self):
        """Test plain creation has only the description."""
        data = build_catalog_document(CatalogSpec(name="Test", org="Acme", description="Base images"))
        root = ET.fromstring(data)

        assert root.tag == f"{{{VCLOUD_NS}}}AdminCatalog"
        assert root.get("name") == "Test"
        assert root.find("v:Description", NS).text == "Base images"
        assert _block_names(data) == ["Description"]

    def test_declares_default_namespace(self):
        """Test the namespace is declared as the default xmlns."""
        data = build_catalog_document(CatalogSpec(name="Test", org="Acme"))
        assert data.startswith(b"<?xml")
        assert f'xmlns="{VCLOUD_NS}"'.encode() in data

    def test_publish_field_order(self):
        """Test publish block fields appear in the fixed order."""
        spec = CatalogSpec.for_publish(
            "Test", "Acme", PublishSettings(password="pw", cache_enabled=True, preserve_identity_info=True)
        )
        block = ET.fromstring(build_catalog_document(spec)).find("v:PublishExternalCatalogParams", NS)

        assert [c.tag.split("}", 1)[1] for c in block] == [
            "IsPublishedExternally",
            "Password",
            "IsCacheEnabled",
            "PreserveIdentityInfoFlag",
        ]
        assert [c.text for c in block] == ["true", "pw", "true", "true"]

    def test_publish_without_password_omits_it(self):
        """Test Password is left out when not set."""
        spec = CatalogSpec.for_publish("Test", "Acme", PublishSettings())
        fields = parse_catalog_document(build_catalog_document(spec))["fields"]
        assert "Password" not in fields
        assert fields["IsPublishedExternally"] == "true"
        assert fields["IsCacheEnabled"] == "false"

    def test_subscription_field_order(self):
        """Test subscription block fields appear in the fixed order."""
        spec = CatalogSpec.for_subscription(
            "Mirror",
            "Acme",
            SubscriptionSettings(source_url="https://other.example.com/vcsp/lib/abc", password="pw"),
        )
        data = build_catalog_document(spec)
        block = ET.fromstring(data).find("v:ExternalCatalogSubscriptionParams", NS)

        assert [c.tag.split("}", 1)[1] for c in block] == [
            "SubscribeToExternalFeeds",
            "Location",
            "Password",
            "LocalCopy",
        ]
        assert block.find("v:Location", NS).text == "https://other.example.com/vcsp/lib/abc"

    def test_subscription_never_has_publish_block(self):
        """Test a subscription document carries no publish block."""
        spec = CatalogSpec.for_subscription("Mirror", "Acme", SubscriptionSettings(source_url="https://x/y"))
        names = _block_names(build_catalog_document(spec))
        assert "PublishExternalCatalogParams" not in names
        assert names.count("ExternalCatalogSubscriptionParams") == 1

    @pytest.mark.parametrize(
        "spec,expected",
        [
            (CatalogSpec(name="A", org="Acme"), "plain"),
            (CatalogSpec.for_publish("A", "Acme", PublishSettings()), "publish"),
            (CatalogSpec.for_subscription("A", "Acme", SubscriptionSettings(source_url="u")), "subscribe"),
        ],
    )
    def test_exactly_one_mode_block(self, spec, expected):
        """Test the mode block matches the spec's settings."""
        data = build_catalog_document(spec)
        names = _block_names(data)
        mode_blocks = [n for n in names if n in ("PublishExternalCatalogParams", "ExternalCatalogSubscriptionParams")]

        assert len(mode_blocks) == (0 if expected == "plain" else 1)
        assert parse_catalog_document(data)["mode"] == expected

    def test_storage_profile_appended_after_mode_block(self):
        """Test the storage profile block comes last."""
        ref = StorageProfileRef(name="Gold", href="https://cloud.example.com/api/vdcStorageProfile/g1")
        spec = CatalogSpec.for_publish("Test", "Acme", PublishSettings())
        data = build_catalog_document(spec, ref)

        assert _block_names(data) == ["Description", "PublishExternalCatalogParams", "CatalogStorageProfiles"]
        profile = ET.fromstring(data).find("v:CatalogStorageProfiles/v:VdcStorageProfile", NS)
        assert profile.get("href") == ref.href
        assert profile.get("name") == "Gold"

    def test_no_storage_profile_block_without_ref(self):
        """Test no storage profile block when nothing was resolved."""
        data = build_catalog_document(CatalogSpec(name="Test", org="Acme", storage_profile="Gold"))
        assert "CatalogStorageProfiles" not in _block_names(data)

    def test_escapes_caller_strings(self):
        """Test markup in caller strings is escaped and read back verbatim."""
        spec = CatalogSpec.for_publish(
            'R&D "<core>"',
            "Acme",
            PublishSettings(password="p<w>&'d"),
            description="</Description><Injected/>",
        )
        data = build_catalog_document(spec)
        parsed = parse_catalog_document(data)

        assert b"<Injected/>" not in data
        assert parsed["name"] == 'R&D "<core>"'
        assert parsed["description"] == "</Description><Injected/>"
        assert parsed["fields"]["Password"] == "p<w>&'d"

    def test_round_trip_recovers_subscription_fields(self):
        """Test every subscription field set on the spec is recovered."""
        settings = SubscriptionSettings(
            source_url="https://feed.example.com/vcsp/lib/1",
            password="secret",
            subscribe_to_external_feed=True,
            keep_local_copy=False,
        )
        ref = StorageProfileRef(name="Silver", href="https://h/api/vdcStorageProfile/s")
        spec = CatalogSpec.for_subscription("Mirror", "Acme", settings, description="copy")
        parsed = parse_catalog_document(build_catalog_document(spec, ref))

        assert parsed["name"] == "Mirror"
        assert parsed["description"] == "copy"
        assert parsed["fields"] == {
            "SubscribeToExternalFeeds": "true",
            "Location": "https://feed.example.com/vcsp/lib/1",
            "Password": "secret",
            "LocalCopy": "false",
        }
        assert parsed["storage_profile_href"] == ref.href


class TestBuildPublishDocument:
    """Tests for the standalone publish update document."""

    def test_update_document(self):
        """Test update carries only IsPublishedExternally and Password."""
        data = build_publish_document(PublishSettings(password="pw", cache_enabled=True))
        root = ET.fromstring(data)

        assert root.tag == f"{{{VCLOUD_NS}}}PublishExternalCatalogParams"
        assert [c.tag.split("}", 1)[1] for c in root] == ["IsPublishedExternally", "Password"]
        assert parse_catalog_document(data)["mode"] == "update"

    def test_unpublish_document(self):
        """Test unpublishing sends false and no password."""
        parsed = parse_catalog_document(build_publish_document(PublishSettings(published_externally=False)))
        assert parsed["fields"] == {"IsPublishedExternally": "false"}

    def test_publish_content_type_spelling(self):
        """Test the publish media type keeps the platform's capital P in Params."""
        assert PUBLISH_CONTENT_TYPE == "application/vnd.vmware.admin.publishExternalCatalogParams+xml"


class TestParseCatalogDocument:
    """Tests for parse_catalog_document."""

    def test_rejects_foreign_namespace(self):
        """Test a document outside the vcloud namespace is rejected."""
        with pytest.raises(ValueError, match="namespace"):
            parse_catalog_document(b"<AdminCatalog name='x'/>")
