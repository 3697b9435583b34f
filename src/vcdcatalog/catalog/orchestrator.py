"""Catalog flows: create, create-subscribed, publish-existing and status.

Each mutating flow runs the precondition gates, issues exactly one mutating
call, then reads the catalog back to build the result. The read-back is a
separate step: if it fails the catalog may already exist, which is reported
as CreatedStatusUnknownError rather than as a failed creation.

Caveat: right after a create or publish the platform may not have filled in
CatalogPublishedUrl yet. Settings.refetch_attempts allows a short bounded
poll for it; the default reads once. A URL still missing after that is
reported as an unknown outcome with a warning, not as an error.
"""

from __future__ import annotations

import logging
import re
import time
import warnings
from typing import Any, Callable, List, Optional

from ..config import Settings
from ..urls import published_url
from .builder import (
    CATALOG_CONTENT_TYPE,
    PUBLISH_CONTENT_TYPE,
    build_catalog_document,
    build_publish_document,
)
from .client import VcdClient
from .errors import (
    CatalogError,
    CatalogNotFoundError,
    CreatedStatusUnknownError,
    MalformedResultError,
    StorageProfileNotMatched,
)
from .models import (
    AdminCatalog,
    CatalogResult,
    CatalogSpec,
    Outcome,
    PublishSettings,
    SubscriptionSettings,
    SyncOutcome,
)
from .outcome import interpret_tasks
from .preconditions import Preconditions, check_preconditions
from .resolver import resolve_storage_profile
from .session import Session, SessionProvider

logger = logging.getLogger(__name__)

_PASSWORD_RE = re.compile(rb"(<Password>).*?(</Password>)", re.DOTALL)


def _masked(body: bytes) -> str:
    return _PASSWORD_RE.sub(rb"\1****\2", body).decode("utf-8", errors="replace")


class CatalogOrchestrator:
    """Runs catalog operations against hosts with a registered session.

    Usage:
        sessions = SessionProvider([Session("cloud.example.com", token)])
        orchestrator = CatalogOrchestrator(sessions)
        result = orchestrator.create_catalog("cloud.example.com", "Acme", "Templates",
                                             publish=PublishSettings(password="s3cret"))
        print(result.published_url)
    """

    def __init__(
        self,
        sessions: SessionProvider,
        settings: Optional[Settings] = None,
        client_factory: Optional[Callable[[Session], Any]] = None,
    ):
        self.sessions = sessions
        self.settings = settings or Settings.load()
        self._client_factory = client_factory or (lambda session: VcdClient(session, self.settings))

    # --- Public flows ---

    def create_catalog(
        self,
        host: str,
        org: str,
        name: str,
        description: str = "",
        storage_profile: str = "",
        publish: Optional[PublishSettings] = None,
    ) -> CatalogResult:
        """Create a catalog, optionally published externally.

        Returns the published URL when the catalog is published, otherwise the
        interpreted task outcome.
        """
        spec = CatalogSpec.for_publish(
            name, org, publish, description=description, storage_profile=storage_profile
        )
        pre, notes = self._create(host, spec)

        want_url = publish is not None and publish.published_externally
        catalog = self._refetch(pre, name, want_url=want_url)
        if catalog is None:
            raise CreatedStatusUnknownError(name, CatalogNotFoundError(pre.session.host, org, name))

        if want_url:
            return self._url_result(pre, catalog, notes)
        return self._outcome_result(pre, catalog.name, interpret_tasks(catalog.tasks), notes)

    def create_subscribed_catalog(
        self,
        host: str,
        org: str,
        name: str,
        subscription: SubscriptionSettings,
        description: str = "",
        storage_profile: str = "",
    ) -> CatalogResult:
        """Create a catalog that mirrors an external published feed.

        The result carries the initial sync outcome; there is no URL, since
        the catalog consumes a feed rather than publishing one.
        """
        spec = CatalogSpec.for_subscription(
            name, org, subscription, description=description, storage_profile=storage_profile
        )
        pre, notes = self._create(host, spec)

        try:
            catalog = self._refetch(pre, name, want_url=False)
        except CreatedStatusUnknownError as e:
            # A malformed read-back is an unknown sync state here, not a failure.
            if not isinstance(e.cause, MalformedResultError):
                raise
            outcome = Outcome.unknown(str(e.cause))
        else:
            if catalog is None:
                outcome = Outcome.unknown("catalog not visible after creation")
            else:
                outcome = interpret_tasks(catalog.tasks)
        return self._outcome_result(pre, name, outcome, notes)

    def publish_existing_catalog(
        self,
        host: str,
        org: str,
        catalog_name: str,
        publish: PublishSettings,
    ) -> CatalogResult:
        """Change the external publication settings of an existing catalog."""
        pre = check_preconditions(self.sessions, self._client_factory, host, org, catalog_name)
        body = build_publish_document(publish)

        logger.info("Publishing catalog %s in %s on %s", catalog_name, org, pre.session.host)
        logger.debug("Request body: %s", _masked(body))
        pre.client.post(pre.catalog.publish_action_href, PUBLISH_CONTENT_TYPE, body)

        catalog = self._refetch(pre, catalog_name, want_url=publish.published_externally)
        if catalog is None:
            raise CreatedStatusUnknownError(
                catalog_name, CatalogNotFoundError(pre.session.host, org, catalog_name)
            )
        if publish.published_externally:
            return self._url_result(pre, catalog, [])
        return self._outcome_result(pre, catalog.name, interpret_tasks(catalog.tasks), [])

    def catalog_status(self, host: str, org: str, catalog_name: str) -> CatalogResult:
        """Report an existing catalog's state without changing anything."""
        pre = check_preconditions(self.sessions, self._client_factory, host, org, catalog_name)
        catalog = pre.catalog
        if catalog.published_url:
            return self._url_result(pre, catalog, [])
        return self._outcome_result(pre, catalog.name, interpret_tasks(catalog.tasks), [])

    # --- Steps ---

    def _create(self, host: str, spec: CatalogSpec):
        pre = check_preconditions(self.sessions, self._client_factory, host, spec.org)
        notes: List[str] = []

        ref = resolve_storage_profile(pre.client, pre.org, spec.storage_profile)
        if spec.storage_profile and ref is None:
            msg = (
                f"Storage profile '{spec.storage_profile}' not found in any VDC of "
                f"'{spec.org}'; the platform default will be used"
            )
            logger.warning("%s", msg)
            warnings.warn(msg, StorageProfileNotMatched, stacklevel=3)
            notes.append(msg)

        body = build_catalog_document(spec, ref)
        logger.info(
            "Creating %s catalog %s in %s on %s", spec.mode.kind, spec.name, spec.org, pre.session.host
        )
        logger.debug("Request body: %s", _masked(body))
        pre.client.post(pre.org.admin_href.rstrip("/") + "/catalogs", CATALOG_CONTENT_TYPE, body)
        return pre, notes

    def _refetch(self, pre: Preconditions, name: str, want_url: bool) -> Optional[AdminCatalog]:
        attempts = max(1, self.settings.refetch_attempts)
        catalog = None
        for attempt in range(attempts):
            try:
                catalog = pre.client.get_catalog(name, pre.org)
            except CatalogError as e:
                raise CreatedStatusUnknownError(name, e) from e

            if not want_url or (catalog is not None and catalog.published_url):
                return catalog
            if attempt + 1 < attempts:
                logger.debug("Published URL for %s not populated yet, retrying", name)
                time.sleep(self.settings.refetch_delay_s)
        return catalog

    # --- Results ---

    def _url_result(self, pre: Preconditions, catalog: AdminCatalog, notes: List[str]) -> CatalogResult:
        if not catalog.published_url:
            # Known platform race: publication accepted, URL not filled in yet.
            msg = f"Published URL for catalog '{catalog.name}' is not available yet"
            logger.warning("%s", msg)
            return self._outcome_result(
                pre, catalog.name, Outcome.unknown("published URL not yet available"), notes + [msg]
            )
        url = published_url(pre.session.host, catalog.published_url)
        logger.info("Catalog %s published at %s", catalog.name, url)
        return CatalogResult(
            catalog_name=catalog.name,
            org=pre.org.name,
            host=pre.session.host,
            published_url=url,
            warnings=tuple(notes),
        )

    def _outcome_result(
        self, pre: Preconditions, name: str, outcome: Outcome, notes: List[str]
    ) -> CatalogResult:
        if outcome.status == SyncOutcome.SUCCESS:
            logger.info("Catalog %s is ready", name)
        elif outcome.status == SyncOutcome.ERROR:
            logger.error("Catalog %s reported an error: %s", name, outcome.detail)
        else:
            logger.warning("Catalog %s status %s %s", name, outcome.status.value, outcome.detail)
        return CatalogResult(
            catalog_name=name,
            org=pre.org.name,
            host=pre.session.host,
            outcome=outcome,
            warnings=tuple(notes),
        )
