"""Errors raised by catalog operations.

Everything fatal derives from CatalogError so callers can catch one type.
An unmatched storage profile is only a warning.
"""

from __future__ import annotations

from typing import Optional


class CatalogError(Exception):
    """Error from catalog operations."""
    pass


class NoSessionError(CatalogError):
    def __init__(self, host: str):
        self.host = host
        super().__init__(f"No authenticated session for {host}. Connect to the server first.")


class OrgNotFoundError(CatalogError):
    def __init__(self, host: str, org: str):
        self.host = host
        self.org = org
        super().__init__(f"Organization '{org}' not found on {host}")


class CatalogNotFoundError(CatalogError):
    def __init__(self, host: str, org: str, catalog: str):
        self.host = host
        self.org = org
        self.catalog = catalog
        super().__init__(f"Catalog '{catalog}' not found in organization '{org}' on {host}")


class RemoteCallError(CatalogError):
    """The platform (or the connection to it) rejected a call."""

    def __init__(self, status: Optional[int], body: str = "", uri: str = "", method: str = ""):
        self.status = status
        self.body = body
        self.uri = uri
        self.method = method
        where = f"{method} {uri}".strip()
        if status is None:
            msg = f"Request failed: {where}"
        else:
            msg = f"API error {status}: {where}"
        if body:
            msg += f"\n{body}"
        super().__init__(msg)


class MalformedResultError(CatalogError):
    """The re-fetch worked but the expected field was not there."""

    def __init__(self, field: str, catalog: str):
        self.field = field
        self.catalog = catalog
        super().__init__(f"Catalog '{catalog}' has no {field} after the operation")


class CreatedStatusUnknownError(CatalogError):
    """The mutating call succeeded but reading the catalog back failed.

    The catalog may exist on the platform even though no result is available.
    """

    def __init__(self, catalog: str, cause: Exception):
        self.catalog = catalog
        self.cause = cause
        super().__init__(f"Catalog '{catalog}' was submitted but its status is unknown: {cause}")


class StorageProfileNotMatched(UserWarning):
    """No VDC of the organization offers the requested storage profile."""
    pass
