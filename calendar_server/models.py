"""Values passed to and returned by the Google Calendar sync adapter."""
from __future__ import annotations

import typing as t
from dataclasses import dataclass, field


@dataclass
class BearerCredential:
    """
    OAuth access token supplied by the caller for one sync session.

    The adapter marks the credential invalid when Google answers 401; the
    caller has to obtain a fresh token to continue.
    """
    token: t.Optional[str]

    @property
    def is_valid(self) -> bool:
        return bool(self.token)

    def invalidate(self) -> None:
        self.token = None


@dataclass
class SyncResult:
    created: int = 0
    failed: int = 0
    skipped: int = 0
    auth_expired: bool = False
    event_ids: list[str] = field(default_factory=list)  # Google ids of created events
    errors: list[str] = field(default_factory=list)

    @property
    def message(self) -> str:
        if self.auth_expired:
            return (f"Google Calendar authentication expired after {self.created} events; "
                    f"{self.skipped} events were not synced. Please sign in again.")
        if self.failed:
            return f"Created {self.created} events, {self.failed} failed."
        return f"Successfully created {self.created} events."

    def to_dict(self) -> dict[str, t.Any]:
        return {
            "created": self.created,
            "failed": self.failed,
            "skipped": self.skipped,
            "authExpired": self.auth_expired,
            "message": self.message,
        }
