"""Content addressing for roast requests.

The fingerprint covers only the creative inputs (startup name, tweet text,
angle), so requests that differ in tweet id, author, website, duration or
energy share one cached artifact.
"""

import hashlib
import json
import re

from roast_agent.models import RoastRequest

FINGERPRINT_PATTERN = re.compile(r"^[a-f0-9]{64}$")
_SEED_HEX = re.compile(r"^[0-9a-fA-F]{8}$")


def canonical_payload(request: RoastRequest) -> str:
    """Serialize the fingerprinted fields in a fixed order."""
    payload = {
        "startupName": request.startup_name.strip(),
        "tweetText": request.tweet_text.strip(),
        "angle": (request.angle or "").strip() or None,
    }
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def compute_fingerprint(request: RoastRequest) -> str:
    """SHA-256 hex digest of the canonical payload."""
    return hashlib.sha256(canonical_payload(request).encode("utf-8")).hexdigest()


def is_valid_fingerprint(value: object) -> bool:
    return isinstance(value, str) and FINGERPRINT_PATTERN.match(value) is not None


def seed_from_fingerprint(fingerprint: str) -> int:
    """First 8 hex chars as an unsigned 32-bit integer, or 0 if unparsable."""
    head = fingerprint[:8] if isinstance(fingerprint, str) else ""
    if not _SEED_HEX.match(head):
        return 0
    return int(head, 16)
