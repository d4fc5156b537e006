"""
Errors raised by outbound provider clients.
"""

from __future__ import annotations

from typing import Any


class UpstreamAuthError(Exception):
    """The OAuth token endpoint was unreachable, timed out, or issued no token."""


class ProviderError(Exception):
    """A provider call failed; carries the status code to surface to the caller."""

    def __init__(self, provider: str, status_code: int, detail: Any = None) -> None:
        self.provider = provider
        self.status_code = status_code
        self.detail = detail
        super().__init__(f"{provider} request failed with status {status_code}")
