"""Shared fixtures for accumulator tests."""

import numpy as np
import pytest


def random_values(rng: np.random.Generator, n: int, max_len: int = 48) -> list[bytes]:
    """n random byte strings with lengths in [0, max_len]."""
    return [
        rng.integers(0, 256, size=int(rng.integers(0, max_len + 1)), dtype=np.uint8).tobytes()
        for _ in range(n)
    ]


def random_indices(rng: np.random.Generator, n: int) -> list[int]:
    """Sorted random non-empty subset of range(n)."""
    k = int(rng.integers(1, n + 1))
    return sorted(rng.choice(n, size=k, replace=False))


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(20240611)


@pytest.fixture
def abcd() -> list[bytes]:
    return [b"a", b"b", b"c", b"d"]
