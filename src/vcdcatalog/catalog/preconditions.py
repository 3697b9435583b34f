"""Gates checked before any mutating call.

Order is fixed: session, then organization, then (when named) catalog. The
first failure raises and nothing after it runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from .errors import CatalogNotFoundError, NoSessionError, OrgNotFoundError
from .models import AdminCatalog, Org
from .session import Session, SessionProvider


@dataclass
class Preconditions:
    session: Session
    client: Any
    org: Org
    catalog: Optional[AdminCatalog] = None


def check_preconditions(
    sessions: SessionProvider,
    client_factory: Callable[[Session], Any],
    host: str,
    org_name: str,
    catalog_name: Optional[str] = None,
) -> Preconditions:
    session = sessions.get(host)
    if session is None:
        raise NoSessionError(host)

    client = client_factory(session)
    org = client.get_org(org_name)
    if org is None:
        raise OrgNotFoundError(session.host, org_name)

    catalog = None
    if catalog_name is not None:
        catalog = client.get_catalog(catalog_name, org)
        if catalog is None:
            raise CatalogNotFoundError(session.host, org_name, catalog_name)

    return Preconditions(session=session, client=client, org=org, catalog=catalog)
