from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence

logger = logging.getLogger(__name__)


@dataclass
class RandomSource:
    """
    A thin wrapper around random.Random to:
    - centralize RNG handling for generation and pickups
    - support optional deterministic seeding for tests
    - provide helper for weighted choice
    """

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.seed is not None:
            self._rng = random.Random(self.seed)
            logger.debug("Initialized RandomSource with deterministic seed=%s", self.seed)
        else:
            self._rng = random.Random()
            logger.debug("Initialized RandomSource with non-deterministic seed")

    def randint(self, a: int, b: int) -> int:
        """Inclusive on both ends."""
        return self._rng.randint(a, b)

    def randrange(self, start: int, stop: int) -> int:
        """Half-open [start, stop)."""
        return self._rng.randrange(start, stop)

    def random(self) -> float:
        return self._rng.random()

    def choice(self, seq: Sequence[Any]) -> Any:
        if not seq:
            raise ValueError("RandomSource.choice() received an empty sequence")
        return seq[self._rng.randrange(0, len(seq))]

    def weighted_choice(self, weights: Dict[Any, float]) -> Any:
        """
        Select a key from a dictionary of weights where values are non-negative numbers.
        Keys are walked in insertion order, so the mapping order fixes the
        cumulative thresholds. If all weights are zero, raises ValueError.
        """
        if not weights:
            raise ValueError("weighted_choice requires a non-empty weights mapping")

        keys: List[Any] = []
        cumulative: List[float] = []
        total = 0.0
        for k, w in weights.items():
            if w < 0:
                raise ValueError(f"Weight for {k!r} must be non-negative, got {w}")
            if w == 0:
                continue
            total += w
            keys.append(k)
            cumulative.append(total)

        if total == 0:
            raise ValueError("All weights are zero; cannot make a weighted choice")

        r = self._rng.random() * total
        for i, c in enumerate(cumulative):
            if r < c:
                return keys[i]
        # Rounding guard
        return keys[-1]


__all__ = ["RandomSource"]
