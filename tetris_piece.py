"""Piece catalog, active piece model, movement and pivot rotation with kicks"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Callable, Iterator, Optional, Tuple

from tetris_board import Board, is_empty_position
from tetris_config import COLS

log = logging.getLogger(__name__)

Shape = Tuple[Tuple[int, ...], ...]

EMPTY, FILLED, PIVOT = 0, 1, 2


class PieceType(str, Enum):
    I = "I"
    L = "L"
    J = "J"
    Z = "Z"
    S = "S"
    O = "O"
    T = "T"
    GHOST = "G"     # projection tag, never drawn from the catalog


PLAYABLE: Tuple[PieceType, ...] = tuple(t for t in PieceType if t is not PieceType.GHOST)

# Spawn orientation. 2 marks the cell rotation turns around; O has none.
SHAPES = {
    PieceType.I: ((1, 1, 2, 1),),
    PieceType.L: ((0, 0, 1),
                  (1, 2, 1)),
    PieceType.J: ((1, 0, 0),
                  (1, 2, 1)),
    PieceType.Z: ((1, 1, 0),
                  (0, 2, 1)),
    PieceType.S: ((0, 1, 1),
                  (1, 2, 0)),
    PieceType.O: ((1, 1),
                  (1, 1)),
    PieceType.T: ((0, 1, 0),
                  (1, 2, 1)),
}

# (drow, dcol) tried in order after a rotation lands on something
KICK_OFFSETS: Tuple[Tuple[int, int], ...] = (
    (1, 0),     # down one
    (0, -1),    # left one
    (0, 1),     # right one
    (-1, 0),    # up one
    (-2, 0),    # up two
    (0, -2),    # left two (I against the right wall)
    (0, 2),     # right two
)


def shape_of(t: PieceType) -> Shape:
    assert t in SHAPES, f"no shape for piece type {t!r}"
    return SHAPES[t]


def rotate_cw(mat: Shape) -> Shape:
    return tuple(tuple(row) for row in zip(*mat[::-1]))


def rotate_ccw(mat: Shape) -> Shape:
    return tuple(tuple(col) for col in zip(*mat))[::-1]


def pivot_of(mat: Shape) -> Optional[Tuple[int, int]]:
    for r, row in enumerate(mat):
        for c, v in enumerate(row):
            if v == PIVOT:
                return r, c
    return None


@dataclass(frozen=True)
class Piece:
    t: PieceType
    shape: Shape
    row: int
    col: int
    lock_elapsed_ms: float = 0.0
    lock_renewals: int = 0

    @staticmethod
    def spawn(t: PieceType, cols: int = COLS) -> "Piece":
        shape = shape_of(t)
        # Bottom row of the shape sits on row 0, the rest waits above the board
        return Piece(t, shape, 1 - len(shape), (cols - len(shape[0])) // 2)

    @property
    def height(self) -> int:
        return len(self.shape)

    @property
    def width(self) -> int:
        return len(self.shape[0])

    def cells(self) -> Iterator[Tuple[int, int]]:
        """Board (row, col) of every occupied cell."""
        for r, row in enumerate(self.shape):
            for c, v in enumerate(row):
                if v:
                    yield self.row + r, self.col + c

    def shifted(self, drow: int, dcol: int) -> "Piece":
        return replace(self, row=self.row + drow, col=self.col + dcol)


# -------------------------------------------------------------
# Movement. Lateral and upward adjustments restart the lock grace timer.
# -------------------------------------------------------------

def move_down(p: Piece) -> Piece:
    return p.shifted(1, 0)


def move_left(p: Piece) -> Piece:
    return replace(p.shifted(0, -1), lock_elapsed_ms=0.0)


def move_right(p: Piece) -> Piece:
    return replace(p.shifted(0, 1), lock_elapsed_ms=0.0)


def move_up(p: Piece) -> Piece:
    return replace(p.shifted(-1, 0), lock_elapsed_ms=0.0)


def try_move(board: Board, piece: Piece, op: Callable[[Piece], Piece]) -> Piece:
    moved = op(piece)
    return moved if is_empty_position(board, moved) else piece


# -------------------------------------------------------------
# Rotation
# -------------------------------------------------------------

def rotated(piece: Piece, cw: bool = True) -> Piece:
    """Turn the shape 90 degrees keeping the pivot cell on the same board square."""
    new_shape = rotate_cw(piece.shape) if cw else rotate_ccw(piece.shape)
    before, after = pivot_of(piece.shape), pivot_of(new_shape)
    drow = dcol = 0
    if before is not None and after is not None:
        drow, dcol = before[0] - after[0], before[1] - after[1]
    return replace(piece, shape=new_shape, row=piece.row + drow, col=piece.col + dcol,
                   lock_elapsed_ms=0.0)


def try_rotate(board: Board, piece: Piece, cw: bool = True) -> Piece:
    turned = rotated(piece, cw)
    if is_empty_position(board, turned):
        return turned
    for drow, dcol in KICK_OFFSETS:
        test = turned.shifted(drow, dcol)
        if is_empty_position(board, test):
            log.debug("rotate %s kicked by (%d, %d)", piece.t.value, drow, dcol)
            return test
    return piece
