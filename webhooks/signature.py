"""
Webhook signature verification.

The payments provider signs every callback with HMAC-SHA256 and sends the
result in a header of the form::

    tilled-signature: t=1717000000000,v1=5257a869e7ecebeda32affa62cdca3fa...

The signed payload is ``"<t>.<raw body>"``.  Verification checks that the
timestamp is fresh (replay protection) and compares signatures in constant
time (timing protection).  Every failure collapses to ``False``; the reason
is only logged.
"""

from __future__ import annotations

import hashlib
import hmac
import logging
import re
import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Union

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "tilled-signature"
DEFAULT_SCHEME = "v1"
DEFAULT_TOLERANCE_SECONDS = 300

_UNIT_DIVISORS = {"s": 1, "ms": 1000}
_HEX = re.compile(r"[0-9a-fA-F]+")


class SignatureFailure(str, Enum):
    MALFORMED_HEADER = "malformed_header"
    STALE_TIMESTAMP = "stale_timestamp"
    SIGNATURE_MISMATCH = "signature_mismatch"


@dataclass(frozen=True)
class SignatureHeader:
    raw_timestamp: str
    timestamp: int
    signature: str


def parse_signature_header(
    header: object,
    scheme: str = DEFAULT_SCHEME,
) -> Optional[SignatureHeader]:
    """
    Parse ``key=value(,key=value)*`` into a ``SignatureHeader``.

    Only ``t`` and ``scheme`` are recognised, anything else is ignored.
    Returns None when the header is not a string or either key is missing.
    """
    if not isinstance(header, str) or not header:
        return None

    raw_timestamp: Optional[str] = None
    signature: Optional[str] = None
    for item in header.split(","):
        key, sep, value = item.strip().partition("=")
        if not sep:
            continue
        if key == "t":
            raw_timestamp = value
        elif key == scheme:
            signature = value

    if not raw_timestamp or not signature:
        return None
    try:
        timestamp = int(raw_timestamp)
    except ValueError:
        return None
    return SignatureHeader(raw_timestamp=raw_timestamp, timestamp=timestamp, signature=signature)


def compute_signature(raw_timestamp: str, raw_body: bytes, secret: Union[str, bytes]) -> str:
    """Hex HMAC-SHA256 of ``"<timestamp>.<body>"``."""
    key = secret.encode() if isinstance(secret, str) else secret
    payload = raw_timestamp.encode() + b"." + raw_body
    return hmac.new(key, payload, hashlib.sha256).hexdigest()


def check_signature(
    header: object,
    raw_body: bytes,
    secret: Union[str, bytes],
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    *,
    timestamp_unit: str = "ms",
    scheme: str = DEFAULT_SCHEME,
    now: Optional[float] = None,
) -> Optional[SignatureFailure]:
    """
    Run the full verification and return the failure reason,
    or None when the request is authentic.
    """
    details = parse_signature_header(header, scheme)
    if details is None:
        return SignatureFailure.MALFORMED_HEADER

    current = time.time() if now is None else now
    # Integer arithmetic in the header's unit; ``t`` may be arbitrarily large.
    divisor = _UNIT_DIVISORS[timestamp_unit]
    if abs(int(current * divisor) - details.timestamp) > tolerance_seconds * divisor:
        return SignatureFailure.STALE_TIMESTAMP

    if not _HEX.fullmatch(details.signature):
        return SignatureFailure.SIGNATURE_MISMATCH

    expected = compute_signature(details.raw_timestamp, raw_body, secret)
    try:
        matches = hmac.compare_digest(
            bytes.fromhex(expected),
            bytes.fromhex(details.signature),
        )
    except ValueError:
        matches = False
    if not matches:
        return SignatureFailure.SIGNATURE_MISMATCH
    return None


def verify_signature(
    header: object,
    raw_body: bytes,
    secret: Union[str, bytes],
    tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    *,
    timestamp_unit: str = "ms",
    scheme: str = DEFAULT_SCHEME,
    now: Optional[float] = None,
) -> bool:
    """Return True only for a fresh, correctly signed webhook."""
    failure = check_signature(
        header,
        raw_body,
        secret,
        tolerance_seconds,
        timestamp_unit=timestamp_unit,
        scheme=scheme,
        now=now,
    )
    if failure is not None:
        logger.warning("Webhook signature rejected: %s", failure.value)
        return False
    return True
