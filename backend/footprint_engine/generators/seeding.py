"""
Deterministic random streams keyed by call-site labels.

Every randomized branch asks for its own generator built from the request
seed plus the labels/indices identifying the branch, so results never
depend on how many draws another branch made.
"""
import zlib
from typing import Union
import numpy as np

Key = Union[int, str]


def _key_to_int(key: Key) -> int:
    if isinstance(key, str):
        return zlib.crc32(key.encode("utf-8"))
    return int(key) & 0xFFFFFFFF


def rng_for(seed: int, *keys: Key) -> np.random.Generator:
    """numpy Generator seeded from (seed, *keys)."""
    entropy = [int(seed) & 0xFFFFFFFF] + [_key_to_int(k) for k in keys]
    return np.random.default_rng(entropy)


def jitter(seed: int, *keys: Key, spread: float = 0.1) -> float:
    """Multiplicative factor in [1 - spread, 1 + spread]."""
    return float(rng_for(seed, *keys).uniform(1.0 - spread, 1.0 + spread))
