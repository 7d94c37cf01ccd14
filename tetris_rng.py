"""Uniform piece randomizer"""
import random
from typing import Optional

from tetris_piece import PLAYABLE, PieceType


class PieceRandom:
    """Draws each type independently with equal weight; seed for reproducible runs."""
    PIECES = PLAYABLE

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def next_piece(self) -> PieceType:
        return self._rng.choice(self.PIECES)
