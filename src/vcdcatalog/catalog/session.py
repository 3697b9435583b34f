"""Authenticated sessions, keyed by host.

The core never logs in. Whatever embeds it registers sessions it already
holds, and the orchestrator looks them up per call.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from ..urls import normalize_host


@dataclass(frozen=True)
class Session:
    """An authenticated connection to one endpoint."""
    host: str
    token: str
    # None defers to Settings.api_version.
    api_version: Optional[str] = None

    @property
    def api_root(self) -> str:
        return f"https://{self.host}/api"


class SessionProvider:
    """Mapping from endpoint host to its active session."""

    def __init__(self, sessions: Optional[List[Session]] = None):
        self._sessions: Dict[str, Session] = {}
        for session in sessions or []:
            self.add(session)

    def add(self, session: Session) -> Session:
        key = normalize_host(session.host)
        if key != session.host:
            session = Session(host=key, token=session.token, api_version=session.api_version)
        self._sessions[key] = session
        return session

    def get(self, host: str) -> Optional[Session]:
        return self._sessions.get(normalize_host(host))

    def remove(self, host: str) -> bool:
        return self._sessions.pop(normalize_host(host), None) is not None

    def hosts(self) -> List[str]:
        return list(self._sessions)

    def __contains__(self, host: object) -> bool:
        return isinstance(host, str) and normalize_host(host) in self._sessions

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def __len__(self) -> int:
        return len(self._sessions)
