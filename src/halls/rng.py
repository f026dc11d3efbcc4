from __future__ import annotations

import hashlib
import json
import logging
import random
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


def stable_hash(*parts: Any) -> int:
    """64-bit unsigned BLAKE2b hash of JSON-encodable parts.

    Used wherever a structural choice must be a pure function of its inputs
    (corridor offsets, damage rolls) rather than a draw from a stream.
    """
    data = json.dumps(list(parts), sort_keys=True, separators=(",", ":")).encode("utf-8")
    return int.from_bytes(hashlib.blake2b(data, digest_size=8).digest(), "big", signed=False)


@dataclass(frozen=True)
class RNGManager:
    """Named random streams under one non-negative integer seed.

    A stream is keyed by a domain ("rooms", "facing", "loot") and the depth,
    so a level draws the same numbers whichever order the levels are built in.
    """

    seed: int

    def __post_init__(self) -> None:
        if isinstance(self.seed, bool) or not isinstance(self.seed, int):
            raise TypeError(f"seed must be an int, got {type(self.seed).__name__}")
        if self.seed < 0:
            raise ValueError("seed must be >= 0")

    def derive_seed(self, domain: str, *identifiers: Any) -> int:
        seed = stable_hash("stream", self.seed, domain, *identifiers)
        logger.debug("Stream %s%s -> %d", domain, list(identifiers), seed)
        return seed

    def context_rng(self, domain: str, *identifiers: Any) -> random.Random:
        return random.Random(self.derive_seed(domain, *identifiers))


__all__ = ["RNGManager", "stable_hash"]
