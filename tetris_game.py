"""Game core: lock and line-clear pipeline, scoring, state machine and gravity.

``Game`` is the single owner of every piece of mutable play state. Nothing
outside it writes to the board, the active piece or the score: timers and
input only ``post`` commands, and the command queue applies them one at a
time in arrival order. A command posted while another is being applied (a
timer firing from inside a handler, say) waits its turn instead of nesting.

Timers owned by the game:

  * gravity   - periodic, period from ``tick_seconds(level)``
  * clear     - one-shot continuation that compacts rows after the flash pause
  * shake     - one-shot reset of the cosmetic hard-drop shake flag

All three are cancelled on pause, game over and restart, so a callback
scheduled against an old session can never touch a new one.
"""
from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, replace
from enum import Enum
from typing import Deque, List, Optional, Tuple

from tetris_board import (Board, compact, copy_board, entry_is_clear, hard_drop,
                          new_board, scan_full_rows, stamp)
from tetris_config import COLS, CONFIG, LINES_PER_LEVEL, MIN_TICK_SECONDS, ROWS, SCORE_TABLE
from tetris_piece import (Piece, PieceType, move_down, move_left, move_right, try_move,
                          try_rotate)
from tetris_rng import PieceRandom
from tetris_sequencer import Sequencer
from tetris_timer import Scheduler, TimerHandle

log = logging.getLogger(__name__)


class GameState(Enum):
    START = "start"
    PAUSE = "pause"
    GAME_OVER = "game_over"


class Action(str, Enum):
    ROTATE_CW = "rotate_cw"
    ROTATE_CCW = "rotate_ccw"
    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    HARD_DROP = "hard_drop"
    HOLD = "hold"
    CONFIRM = "confirm"


class Command(Enum):
    """Commands only timers post."""
    GRAVITY = "gravity"
    FINISH_CLEAR = "finish_clear"
    END_SHAKE = "end_shake"


def tick_seconds(level: int) -> float:
    """Seconds between gravity steps at ``level`` (1-based)."""
    base = 0.8 - (level - 1) * 0.007
    if base <= 0:
        return MIN_TICK_SECONDS
    return max(base ** (level - 1), MIN_TICK_SECONDS)


@dataclass
class ScoreState:
    score: int = 0
    lines: int = 0

    @property
    def level(self) -> int:
        return self.lines // LINES_PER_LEVEL + 1

    def add_lines(self, n: int) -> bool:
        """Score ``n`` rows cleared by one lock. Returns True when the level went up."""
        before = self.level
        self.score += before * SCORE_TABLE[n]
        self.lines += n
        return self.level != before


@dataclass(frozen=True)
class Snapshot:
    game_state: GameState
    level: int
    lines: int
    score: int
    next_type: PieceType
    hold_type: Optional[PieceType]
    rows_pending_clear: Tuple[int, ...]
    shake: bool


class Game:
    def __init__(self, seed: Optional[int] = None, scheduler: Optional[Scheduler] = None,
                 rows: int = ROWS, cols: int = COLS):
        self.rows, self.cols = rows, cols
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.rng = PieceRandom(seed)

        self._queue: Deque[Tuple[object, tuple]] = deque()
        self._draining = False
        self._gravity: Optional[TimerHandle] = None
        self._clear: Optional[TimerHandle] = None
        self._shake: Optional[TimerHandle] = None

        self._new_session()
        self._start_gravity()

    # ---------- session ----------
    def _new_session(self):
        self.board: Board = new_board(self.rows, self.cols)
        self.sequencer = Sequencer(self.rng, self.cols)
        self.score = ScoreState()
        self.rows_pending_clear: Optional[List[bool]] = None
        self.shake = False
        self.state = GameState.START
        self.active: Optional[Piece] = self.sequencer.spawn()

    @property
    def level(self) -> int:
        return self.score.level

    @property
    def tick_ms(self) -> float:
        return tick_seconds(self.level) * 1000.0

    # ---------- timers ----------
    def _start_gravity(self):
        if self._gravity is not None:
            self._gravity.cancel()
        period = self.tick_ms
        self._gravity = self.scheduler.call_every(period, lambda: self.post(Command.GRAVITY, period))
        log.debug("gravity every %.1fms (level %d)", period, self.level)

    def _schedule_clear(self):
        self._clear = self.scheduler.call_later(CONFIG["CLEAR_DELAY_MS"],
                                                lambda: self.post(Command.FINISH_CLEAR))

    def _cancel_timers(self):
        for handle in (self._gravity, self._clear, self._shake):
            if handle is not None:
                handle.cancel()
        self._gravity = self._clear = self._shake = None
        self.shake = False

    def stop(self):
        """Drop every outstanding timer, e.g. when the front-end shuts down."""
        self._cancel_timers()

    def advance(self, dt_ms: float):
        self.scheduler.advance(dt_ms)

    # ---------- command queue ----------
    def post(self, command, *args):
        self._queue.append((command, args))
        if self._draining:
            return
        self._draining = True
        try:
            while self._queue:
                cmd, cmd_args = self._queue.popleft()
                self._apply(cmd, *cmd_args)
        finally:
            self._draining = False

    def _apply(self, cmd, *args):
        if cmd is Action.CONFIRM:
            self._confirm()
            return
        if self.state is not GameState.START:
            return
        if cmd is Command.GRAVITY:
            self._step_down(args[0], by_gravity=True)
        elif cmd is Command.FINISH_CLEAR:
            self._finish_clear()
        elif cmd is Command.END_SHAKE:
            self.shake = False
            self._shake = None
        elif self.active is None:
            return
        elif cmd is Action.LEFT:
            self.active = try_move(self.board, self.active, move_left)
        elif cmd is Action.RIGHT:
            self.active = try_move(self.board, self.active, move_right)
        elif cmd is Action.DOWN:
            self._step_down(0.0, by_gravity=False)
        elif cmd is Action.ROTATE_CW:
            self.active = try_rotate(self.board, self.active, cw=True)
        elif cmd is Action.ROTATE_CCW:
            self.active = try_rotate(self.board, self.active, cw=False)
        elif cmd is Action.HARD_DROP:
            self._hard_drop()
        elif cmd is Action.HOLD:
            self.active = self.sequencer.hold(self.active)

    # ---------- state machine ----------
    def _confirm(self):
        if self.state is GameState.START:
            self._cancel_timers()
            self.state = GameState.PAUSE
            log.debug("paused")
        elif self.state is GameState.PAUSE:
            self.state = GameState.START
            self._start_gravity()
            if self.rows_pending_clear is not None:
                self._schedule_clear()
            log.debug("resumed")
        else:
            self._cancel_timers()
            self._new_session()
            self._start_gravity()
            log.info("new game started")

    # ---------- gravity / lock ----------
    def _step_down(self, dt: float, by_gravity: bool):
        p = self.active
        if p is None:
            return
        moved = try_move(self.board, p, move_down)
        if moved is not p:
            self.active = moved
            return
        # Grace time only runs while the piece is resting
        if by_gravity:
            p = replace(p, lock_elapsed_ms=p.lock_elapsed_ms + dt)
        if p.lock_elapsed_ms <= CONFIG["LOCK_DELAY_MS"] and p.lock_renewals < CONFIG["LOCK_RENEWALS"]:
            self.active = replace(p, lock_elapsed_ms=0.0, lock_renewals=p.lock_renewals + 1)
            return
        self.active = p
        self._lock()

    def _hard_drop(self):
        self.active = hard_drop(self.board, self.active)
        self._lock()
        if self.state is not GameState.START:
            return
        if self._shake is not None:
            self._shake.cancel()
        self.shake = True
        self._shake = self.scheduler.call_later(CONFIG["SHAKE_MS"],
                                                lambda: self.post(Command.END_SHAKE))

    def _lock(self):
        piece, self.active = self.active, None
        stamp(self.board, piece)
        full = scan_full_rows(self.board)
        n = sum(full)
        if self.score.add_lines(n):
            log.debug("level up: %d", self.level)
            self._start_gravity()
        log.debug("locked %s at (%d, %d), %d rows", piece.t.value, piece.row, piece.col, n)
        if n == 0:
            self._spawn_next()
            return
        self.rows_pending_clear = full
        self._schedule_clear()

    def _finish_clear(self):
        self._clear = None
        if self.rows_pending_clear is None:
            return
        compact(self.board, self.rows_pending_clear)
        self.rows_pending_clear = None
        self._spawn_next()

    def _spawn_next(self):
        self.sequencer.piece_locked()
        if not entry_is_clear(self.board):
            self._cancel_timers()
            self.state = GameState.GAME_OVER
            log.info("game over: score %d, lines %d, level %d",
                     self.score.score, self.score.lines, self.level)
            return
        self.active = self.sequencer.spawn()

    # ---------- queries ----------
    def view_matrix(self) -> Board:
        grid = copy_board(self.board)
        if self.state is GameState.GAME_OVER or self.active is None:
            return grid
        stamp(grid, hard_drop(self.board, self.active), PieceType.GHOST)
        stamp(grid, self.active)
        return grid

    def snapshot(self) -> Snapshot:
        pending = self.rows_pending_clear or []
        return Snapshot(
            game_state=self.state,
            level=self.level,
            lines=self.score.lines,
            score=self.score.score,
            next_type=self.sequencer.next_type,
            hold_type=self.sequencer.hold_type,
            rows_pending_clear=tuple(r for r, full in enumerate(pending) if full),
            shake=self.shake,
        )
