"""Seeded random streams for terrain generation.

The solver draws its tie-breaks and collapse choices from the ``"map.wfc"``
stream. Every stream is derived from one master seed, so seeding once with
``rng.init(seed)`` makes every later ``solve()`` reproducible. A solver that
is handed an explicit ``random.Random`` bypasses the streams entirely.

Usage:
    from wavemap.util import rng

    rng.init("burrito1")
    grid = solve(categories, 25)  # same grid on every run with this seed
"""

from __future__ import annotations

import zlib
from collections.abc import Sequence
from random import Random
from typing import TYPE_CHECKING, TypeVar

if TYPE_CHECKING:
    from wavemap.types import RandomSeed

T = TypeVar("T")


def derive_seed(master_seed: RandomSeed, domain: str) -> int | None:
    """Stable per-domain seed; None keeps system entropy.

    crc32 rather than hash(), which is salted per interpreter session.
    """
    if master_seed is None:
        return None
    return zlib.crc32(f"{master_seed}:{domain}".encode())


class RNGStream:
    """A named stream that survives reseeding.

    Modules keep a reference at import time; the backing ``Random`` is
    looked up on every draw, so ``rng.init()`` takes effect immediately.
    """

    def __init__(self, provider: RNGProvider, domain: str) -> None:
        self._provider = provider
        self.domain = domain

    def choice(self, seq: Sequence[T]) -> T:
        return self._provider.backing(self.domain).choice(seq)


# Anything the solver can draw from.
type RNG = Random | RNGStream


class RNGProvider:
    """Owns one ``Random`` per stream name, all derived from a master seed."""

    def __init__(self, master_seed: RandomSeed = None) -> None:
        self.master_seed = master_seed
        self._backing: dict[str, Random] = {}
        self._streams: dict[str, RNGStream] = {}

    def get(self, domain: str) -> RNGStream:
        stream = self._streams.get(domain)
        if stream is None:
            stream = self._streams[domain] = RNGStream(self, domain)
        return stream

    def backing(self, domain: str) -> Random:
        generator = self._backing.get(domain)
        if generator is None:
            generator = Random(derive_seed(self.master_seed, domain))
            self._backing[domain] = generator
        return generator

    def reset(self, master_seed: RandomSeed = None) -> None:
        """Reseed; streams restart from the beginning of their sequence."""
        self.master_seed = master_seed
        self._backing.clear()


_provider: RNGProvider | None = None


def init(master_seed: RandomSeed = None) -> None:
    """Seed every stream. Streams handed out earlier follow the new seed."""
    global _provider
    if _provider is None:
        _provider = RNGProvider(master_seed)
    else:
        _provider.reset(master_seed)


def get(domain: str) -> RNGStream:
    """Stream for ``domain``, seeding from ``config.RANDOM_SEED`` on first use."""
    if _provider is None:
        from wavemap import config

        init(config.RANDOM_SEED)
    assert _provider is not None
    return _provider.get(domain)


def reset(master_seed: RandomSeed = None) -> None:
    if _provider is None:
        raise RuntimeError("RNG not initialized - call rng.init() first")
    _provider.reset(master_seed)
