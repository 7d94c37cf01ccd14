import argparse
import logging
import sys

import pygame

from tetris_config import COLS, CONFIG, ROWS
from tetris_game import Game
from tetris_input import InputController
from tetris_render import Renderer

log = logging.getLogger(__name__)


def setup_logging(verbose: bool):
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(level=level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
                        datefmt="%H:%M:%S")


def parse_args(argv=None):
    ap = argparse.ArgumentParser(description="Falling-block puzzle (pygame front-end)")
    ap.add_argument("--seed", type=int, default=CONFIG["SEED"], help="seed the piece randomizer")
    ap.add_argument("--cell-size", type=int, default=CONFIG["CELL_SIZE"], help="pixels per board cell")
    ap.add_argument("--verbose", "-v", action="store_true", help="debug logging")
    return ap.parse_args(argv)


def recreate_window(size, flags=pygame.DOUBLEBUF):
    try:
        return pygame.display.set_mode(size, flags, vsync=1)
    except TypeError:
        return pygame.display.set_mode(size, flags)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(args.verbose)
    CONFIG["CELL_SIZE"] = args.cell_size

    pygame.init()
    pygame.event.set_allowed([pygame.QUIT, pygame.KEYDOWN, pygame.KEYUP])
    font = pygame.font.SysFont(None, 22)
    big_font = pygame.font.SysFont(None, 42)

    render = Renderer(ROWS, COLS, font, big_font)
    screen = recreate_window(render.size)
    pygame.display.set_caption("Falling Blocks")
    clock = pygame.time.Clock()

    game = Game(seed=args.seed)
    controls = InputController(game)
    controls.bind()
    log.info("started (seed=%s)", args.seed)

    try:
        while True:
            dt = clock.tick(60)
            for e in pygame.event.get():
                if e.type == pygame.QUIT:
                    return 0
                controls.handle_event(e)
            game.advance(dt)
            render.draw(screen, game.view_matrix(), game.snapshot())
            pygame.display.flip()
    finally:
        controls.unbind()
        game.stop()
        pygame.quit()


if __name__ == '__main__':
    sys.exit(main())
