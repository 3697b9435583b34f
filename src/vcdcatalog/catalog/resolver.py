"""Storage profile lookup across an organization's VDCs."""

from __future__ import annotations

import logging
from typing import Optional

from .models import Org, StorageProfileRef

logger = logging.getLogger(__name__)


def resolve_storage_profile(directory, org: Org, profile_name: str) -> Optional[StorageProfileRef]:
    """Find the href of the storage profile called `profile_name`.

    An empty name means no preference and returns None without touching the
    directory. VDCs and their profiles are scanned in the order the platform
    lists them and the first exact (case-sensitive) match wins, so a name
    offered by several VDCs resolves to the first one. Returns None when no
    VDC offers the profile.
    """
    if not profile_name:
        return None

    for vdc in directory.get_org_vdcs(org):
        for profile in vdc.storage_profiles:
            if profile.name == profile_name:
                logger.debug("Storage profile %s found on VDC %s", profile_name, vdc.name)
                return StorageProfileRef(name=profile.name, href=profile.href, vdc_name=vdc.name)

    return None
