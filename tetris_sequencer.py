"""Next-piece preview and hold slot"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tetris_config import COLS
from tetris_piece import Piece, PieceType
from tetris_rng import PieceRandom

log = logging.getLogger(__name__)


@dataclass
class SequencerState:
    next_type: PieceType
    hold_type: Optional[PieceType] = None
    hold_locked: bool = False


class Sequencer:
    """Feeds spawns from a one-slot preview and runs the once-per-piece hold swap."""

    def __init__(self, rng: PieceRandom, cols: int = COLS):
        self.rng = rng
        self.cols = cols
        self.state = SequencerState(next_type=rng.next_piece())

    @property
    def next_type(self) -> PieceType:
        return self.state.next_type

    @property
    def hold_type(self) -> Optional[PieceType]:
        return self.state.hold_type

    @property
    def hold_locked(self) -> bool:
        return self.state.hold_locked

    def spawn(self) -> Piece:
        """Consume the queued type and refill the preview."""
        t = self.state.next_type
        self.state.next_type = self.rng.next_piece()
        log.debug("spawn %s, next %s", t.value, self.state.next_type.value)
        return Piece.spawn(t, self.cols)

    def piece_locked(self):
        self.state.hold_locked = False

    def hold(self, active: Optional[Piece]) -> Optional[Piece]:
        """Return the piece that replaces ``active``, or ``active`` itself when hold is refused."""
        if active is None or self.state.hold_locked:
            return active
        held = self.state.hold_type
        self.state.hold_type = active.t
        self.state.hold_locked = True
        if held is None:
            log.debug("hold %s", active.t.value)
            return self.spawn()
        log.debug("hold swap %s <-> %s", active.t.value, held.value)
        return Piece.spawn(held, self.cols)
