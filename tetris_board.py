"""Board helpers: collision, stamp, full-row scan, compaction, hard drop"""
from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from tetris_config import COLS, ROWS

if TYPE_CHECKING:
    from tetris_piece import Piece, PieceType

Board = List[List[Optional["PieceType"]]]

# Every spawn orientation rests its bottom row inside this footprint
ENTRY_ROW = 0
ENTRY_WIDTH = 4


def new_board(rows: int = ROWS, cols: int = COLS) -> Board:
    if rows <= 0 or cols <= 0:
        raise ValueError("Board rows/cols must be > 0")
    return [[None] * cols for _ in range(rows)]


def copy_board(board: Board) -> Board:
    return [row[:] for row in board]


def is_empty_position(board: Board, piece: Piece) -> bool:
    rows, cols = len(board), len(board[0])
    for r, c in piece.cells():
        if c < 0 or c >= cols or r >= rows:
            return False
        if r >= 0 and board[r][c] is not None:
            return False
    return True


def stamp(board: Board, piece: Piece, tag: Optional[PieceType] = None) -> Board:
    """Write ``tag`` (the piece's own type by default) into every visible cell."""
    rows, cols = len(board), len(board[0])
    tag = piece.t if tag is None else tag
    for r, c in piece.cells():
        if 0 <= r < rows and 0 <= c < cols:
            board[r][c] = tag
    return board


def scan_full_rows(board: Board) -> List[bool]:
    return [all(cell is not None for cell in row) for row in board]


def compact(board: Board, full: Sequence[bool]) -> int:
    """Drop the rows flagged in ``full`` and refill from the top. Returns rows removed."""
    cols = len(board[0])
    kept = [row for row, gone in zip(board, full) if not gone]
    cleared = len(board) - len(kept)
    board[:] = [[None] * cols for _ in range(cleared)] + kept
    return cleared


def hard_drop(board: Board, piece: Piece) -> Piece:
    test = piece
    while is_empty_position(board, test):
        test = test.shifted(1, 0)
    return test.shifted(-1, 0)


def entry_cols(cols: int = COLS) -> range:
    start = (cols - ENTRY_WIDTH) // 2
    return range(max(start, 0), min(start + ENTRY_WIDTH, cols))


def entry_is_clear(board: Board) -> bool:
    return all(board[ENTRY_ROW][c] is None for c in entry_cols(len(board[0])))
