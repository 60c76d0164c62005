"""Duplicate upload detection via content fingerprints.

Every document's text gets an exact SHA-256 digest and a 64-bit SimHash. An
identical digest marks an exact re-upload; a small Hamming distance between
SimHashes marks the same report captured again with OCR noise or typos.
"""

import asyncio
import hashlib
import logging
import re

from ..config import DEFAULT_CONFIG, DuplicateConfig
from ..schemas.batch_output import ContentFingerprint, DuplicateMatch

logger = logging.getLogger(__name__)

SIMHASH_BITS = 64
ZERO_SIMHASH = "0" * (SIMHASH_BITS // 4)

_FNV_OFFSET = 0xCBF29CE484222325
_FNV_PRIME = 0x100000001B3
_MASK_64 = (1 << 64) - 1

_PUNCTUATION = re.compile(r"[^\w\s]|_")


def normalize_text_for_hashing(text: str | None) -> str:
    """Lowercase, drop punctuation and collapse whitespace."""
    if not text:
        return ""
    return " ".join(_PUNCTUATION.sub("", text.lower()).split())


def _token_hash(token: str) -> int:
    # 64-bit FNV-1a over the UTF-8 bytes
    value = _FNV_OFFSET
    for byte in token.encode("utf-8"):
        value ^= byte
        value = (value * _FNV_PRIME) & _MASK_64
    return value


def compute_simhash(text: str | None) -> str:
    """64-bit SimHash of whitespace-separated tokens as 16 hex characters.

    Texts with fewer than two tokens fingerprint to all zeros.
    """
    tokens = (text or "").split()
    if len(tokens) < 2:
        return ZERO_SIMHASH

    weights = [0] * SIMHASH_BITS
    for token in tokens:
        value = _token_hash(token)
        for bit in range(SIMHASH_BITS):
            if (value >> bit) & 1:
                weights[bit] += 1
            else:
                weights[bit] -= 1

    fingerprint = 0
    for bit, weight in enumerate(weights):
        if weight > 0:
            fingerprint |= 1 << bit
    return f"{fingerprint:016x}"


def hamming_distance(left: str | None, right: str | None) -> int:
    """Differing bits between two fingerprints, 64 when either is malformed."""
    if not left or not right or len(left) != 16 or len(right) != 16:
        return SIMHASH_BITS
    try:
        return bin(int(left, 16) ^ int(right, 16)).count("1")
    except ValueError:
        return SIMHASH_BITS


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


async def generate_content_hash(text: str | None) -> ContentFingerprint:
    """Fingerprint a document's text for duplicate detection."""
    normalized = normalize_text_for_hashing(text)
    digest = await asyncio.to_thread(_sha256, normalized)
    return ContentFingerprint(hash=digest, simhash=compute_simhash(normalized))


def classify_duplicate(
    candidate: ContentFingerprint,
    existing: list[ContentFingerprint | None],
    config: DuplicateConfig = DEFAULT_CONFIG.duplicates,
) -> DuplicateMatch | None:
    """Find the earlier upload a candidate duplicates, if any.

    Exact digest matches win. Otherwise the closest SimHash within the
    configured distance is returned, the earliest one on ties. Zero
    fingerprints come from near-empty text and never count as near matches.
    """
    for index, fingerprint in enumerate(existing):
        if fingerprint is not None and fingerprint.hash == candidate.hash:
            return DuplicateMatch(kind="exact", index=index, distance=0)

    if candidate.simhash == ZERO_SIMHASH:
        return None

    best: DuplicateMatch | None = None
    for index, fingerprint in enumerate(existing):
        if fingerprint is None or fingerprint.simhash == ZERO_SIMHASH:
            continue
        distance = hamming_distance(candidate.simhash, fingerprint.simhash)
        if distance <= config.near_duplicate_distance and (best is None or distance < best.distance):
            best = DuplicateMatch(kind="near", index=index, distance=distance)

    if best is not None:
        logger.info("Near-duplicate upload at distance %d", best.distance)
    return best
