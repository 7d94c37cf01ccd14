"""Input controller: key press/release to game actions, DAS/ARR auto-repeat"""
import logging
from typing import Dict, Set

import pygame

from tetris_config import CONFIG
from tetris_game import Action, Game, GameState
from tetris_timer import TimerHandle

log = logging.getLogger(__name__)

REPEATABLE = frozenset({Action.LEFT, Action.RIGHT, Action.DOWN})

KEYMAP: Dict[int, Action] = {
    pygame.K_LEFT: Action.LEFT,
    pygame.K_RIGHT: Action.RIGHT,
    pygame.K_DOWN: Action.DOWN,
    pygame.K_UP: Action.ROTATE_CW,
    pygame.K_x: Action.ROTATE_CW,
    pygame.K_z: Action.ROTATE_CCW,
    pygame.K_SPACE: Action.HARD_DROP,
    pygame.K_c: Action.HOLD,
    pygame.K_LSHIFT: Action.HOLD,
    pygame.K_RETURN: Action.CONFIRM,
    pygame.K_p: Action.CONFIRM,
}


class InputController:
    """Turns key press/release into game commands, auto-repeating left, right and down."""
    def __init__(self, game: Game):
        self.game = game
        self.bound = False
        self._held: Set[Action] = set()
        self._repeats: Dict[Action, TimerHandle] = {}

    # ---------- source binding ----------
    def bind(self):
        self.bound = True

    def unbind(self):
        self.release_all()
        self.bound = False

    def handle_event(self, event: pygame.event.Event):
        if event.type not in (pygame.KEYDOWN, pygame.KEYUP):
            return
        action = KEYMAP.get(event.key)
        if action is None:
            return
        if event.type == pygame.KEYDOWN:
            self.press(action)
        else:
            self.release(action)

    # ---------- press / release ----------
    def press(self, action: Action):
        if not self.bound or action in self._held:
            return
        self._held.add(action)
        if action is Action.CONFIRM:
            # Pausing, resuming and restarting all invalidate held movement
            self._cancel_repeats()
            self.game.post(action)
            return
        if self.game.state is not GameState.START:
            return
        self.game.post(action)
        if action in REPEATABLE:
            self._schedule(action, CONFIG["DAS_MS"])

    def release(self, action: Action):
        self._held.discard(action)
        self._cancel(action)

    def release_all(self):
        self._held.clear()
        self._cancel_repeats()

    # ---------- repeat chain ----------
    def _schedule(self, action: Action, delay_ms: float):
        self._repeats[action] = self.game.scheduler.call_later(delay_ms, lambda: self._repeat(action))

    def _repeat(self, action: Action):
        if self.game.state is not GameState.START:
            self._cancel(action)
            return
        self.game.post(action)
        self._schedule(action, max(CONFIG["ARR_MS"], 1))

    def _cancel(self, action: Action):
        handle = self._repeats.pop(action, None)
        if handle is not None:
            handle.cancel()

    def _cancel_repeats(self):
        for action in list(self._repeats):
            self._cancel(action)
        self._held.intersection_update({Action.CONFIRM})

    def repeating(self) -> Set[Action]:
        return {a for a, h in self._repeats.items() if h.active}
