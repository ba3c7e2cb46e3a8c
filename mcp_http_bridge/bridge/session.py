"""Process-wide upstream session token."""

from __future__ import annotations


class SessionToken:
    """Set-once cell for the upstream session id.

    Either pre-seeded or adopted from the first non-empty response header;
    never overwritten afterwards. All access happens on the event loop
    thread, so the check-then-set in ``adopt`` needs no lock.
    """

    def __init__(self, initial: str | None = None):
        self._value = (initial or "").strip() or None

    @property
    def value(self) -> str | None:
        return self._value

    def adopt(self, candidate: str | None) -> bool:
        """Store ``candidate`` if no token is set yet; True when it was adopted."""
        if self._value is not None:
            return False
        candidate = (candidate or "").strip()
        if not candidate:
            return False
        self._value = candidate
        return True
