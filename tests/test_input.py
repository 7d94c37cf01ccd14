import unittest

import pygame

from tetris_config import CONFIG
from tetris_game import Action, Game, GameState
from tetris_input import KEYMAP, REPEATABLE, InputController
from tetris_piece import Piece, PieceType, shape_of


class RepeatTests(unittest.TestCase):
    def setUp(self):
        self.game = Game(seed=10)
        self.game.active = Piece(PieceType.O, shape_of(PieceType.O), 5, 8)
        self.ctl = InputController(self.game)
        self.ctl.bind()

    def test_left_fires_then_das_then_arr(self):
        das, arr = CONFIG["DAS_MS"], CONFIG["ARR_MS"]
        self.ctl.press(Action.LEFT)
        self.assertEqual(self.game.active.col, 7)
        self.game.advance(das - 1)
        self.assertEqual(self.game.active.col, 7)
        self.game.advance(1)
        self.assertEqual(self.game.active.col, 6)
        self.game.advance(arr)
        self.assertEqual(self.game.active.col, 5)
        self.game.advance(arr * 2)
        self.assertEqual(self.game.active.col, 3)

        self.ctl.release(Action.LEFT)
        self.assertEqual(self.ctl.repeating(), set())
        self.game.advance(arr * 4)
        self.assertEqual(self.game.active.col, 3)

    def test_release_before_das_moves_once(self):
        self.game.active = Piece(PieceType.O, shape_of(PieceType.O), 5, 4)
        self.ctl.press(Action.RIGHT)
        self.game.advance(CONFIG["DAS_MS"] // 2)
        self.ctl.release(Action.RIGHT)
        self.game.advance(CONFIG["DAS_MS"] * 2)
        self.assertEqual(self.game.active.col, 5)

    def test_right_wall_stops_repeat_moves(self):
        self.ctl.press(Action.RIGHT)
        self.game.advance(CONFIG["DAS_MS"] + CONFIG["ARR_MS"] * 3)
        self.assertEqual(self.game.active.col, 8)

    def test_each_action_has_its_own_chain(self):
        self.ctl.press(Action.LEFT)
        self.ctl.press(Action.DOWN)
        self.assertEqual(self.ctl.repeating(), {Action.LEFT, Action.DOWN})
        self.ctl.release(Action.DOWN)
        self.assertEqual(self.ctl.repeating(), {Action.LEFT})

    def test_single_shot_actions_do_not_repeat(self):
        self.game.active = Piece(PieceType.T, shape_of(PieceType.T), 5, 4)
        self.ctl.press(Action.ROTATE_CW)
        once = self.game.active
        self.assertNotEqual(once.shape, shape_of(PieceType.T))
        self.game.advance(CONFIG["DAS_MS"] + CONFIG["ARR_MS"] * 5)
        self.assertEqual(self.game.active.shape, once.shape)
        self.ctl.press(Action.ROTATE_CW)     # still held, no new press
        self.assertEqual(self.game.active.shape, once.shape)
        self.assertEqual(self.ctl.repeating(), set())
        self.assertEqual(REPEATABLE, {Action.LEFT, Action.RIGHT, Action.DOWN})

    def test_paused_only_confirm_gets_through(self):
        self.ctl.press(Action.LEFT)
        self.ctl.press(Action.CONFIRM)
        self.assertIs(self.game.state, GameState.PAUSE)
        self.assertEqual(self.ctl.repeating(), set())
        col = self.game.active.col

        self.ctl.release(Action.LEFT)
        self.ctl.press(Action.LEFT)
        self.ctl.press(Action.HARD_DROP)
        self.game.advance(1000)
        self.assertEqual(self.game.active.col, col)
        self.assertEqual(self.ctl.repeating(), set())

        self.ctl.release(Action.CONFIRM)
        self.ctl.press(Action.CONFIRM)
        self.assertIs(self.game.state, GameState.START)

    def test_unbound_source_is_ignored(self):
        self.ctl.unbind()
        self.ctl.press(Action.LEFT)
        self.assertEqual(self.game.active.col, 8)
        self.ctl.bind()
        self.ctl.press(Action.LEFT)
        self.assertEqual(self.game.active.col, 7)
        self.ctl.unbind()
        self.assertEqual(self.ctl.repeating(), set())


class KeyEventTests(unittest.TestCase):
    def test_pygame_events_route_through_keymap(self):
        game = Game(seed=11)
        game.active = Piece(PieceType.O, shape_of(PieceType.O), 5, 4)
        ctl = InputController(game)
        ctl.bind()
        ctl.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_LEFT))
        self.assertEqual(game.active.col, 3)
        self.assertEqual(ctl.repeating(), {Action.LEFT})
        ctl.handle_event(pygame.event.Event(pygame.KEYUP, key=pygame.K_LEFT))
        self.assertEqual(ctl.repeating(), set())
        ctl.handle_event(pygame.event.Event(pygame.KEYDOWN, key=pygame.K_F12))
        self.assertEqual(game.active.col, 3)

    def test_every_action_is_bound(self):
        self.assertEqual(set(KEYMAP.values()), set(Action))


if __name__ == "__main__":
    unittest.main()
