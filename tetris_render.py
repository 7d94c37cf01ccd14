"""
pygame painter for the game core.

Reads only ``Game.view_matrix()`` and ``Game.snapshot()``; never touches game
state. Caches:
- Static background (board grid + side panel frames).
- One solid and one ghost-outline sprite per piece type.
- HUD text, re-rendered only when the value behind it changes.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, Tuple

import pygame

from tetris_config import CONFIG
from tetris_game import GameState, Snapshot
from tetris_piece import PieceType, shape_of

COLORS: Dict[PieceType, Tuple[int, int, int]] = {
    PieceType.I: (102, 224, 255),
    PieceType.J: (106, 119, 255),
    PieceType.L: (255, 158, 94),
    PieceType.O: (255, 224, 102),
    PieceType.S: (94, 224, 142),
    PieceType.T: (200, 119, 255),
    PieceType.Z: (255, 102, 119),
}
GHOST_COLOR = (150, 160, 200)
CLEAR_FLASH = (240, 240, 255)
SHAKE_PX = 4


@dataclass
class Layout:
    cell: int
    board_x: int
    board_y: int
    board_w: int
    board_h: int
    panel_x: int
    panel_w: int
    total_w: int
    total_h: int

    @staticmethod
    def compute(rows: int, cols: int, margin: int = 16, panel_w: int = 220) -> "Layout":
        cell = int(CONFIG["CELL_SIZE"])
        board_w, board_h = cols * cell, rows * cell
        return Layout(
            cell=cell, board_x=margin, board_y=margin, board_w=board_w, board_h=board_h,
            panel_x=margin * 2 + board_w, panel_w=panel_w,
            total_w=margin * 3 + board_w + panel_w, total_h=margin * 2 + board_h,
        )


@dataclass
class HudCache:
    score: int = -1
    level: int = -1
    lines: int = -1
    next_type: Optional[PieceType] = None
    hold_type: Optional[PieceType] = None
    score_s: Optional[pygame.Surface] = None
    level_s: Optional[pygame.Surface] = None
    lines_s: Optional[pygame.Surface] = None
    next_s: Optional[pygame.Surface] = None
    hold_s: Optional[pygame.Surface] = None


class Renderer:
    def __init__(self, rows: int, cols: int, font: pygame.font.Font, big_font: pygame.font.Font):
        self.rows, self.cols = rows, cols
        self.font = font
        self.big_font = big_font
        self.layout = Layout.compute(rows, cols)
        self.pv_cell = max(14, int(self.layout.cell * 0.75))
        self.hud = HudCache()
        self._make_static()
        self._make_cells()

    @property
    def size(self) -> Tuple[int, int]:
        return self.layout.total_w, self.layout.total_h

    # ---------- cached surfaces ----------
    def _make_static(self):
        d = self.layout
        self.bg = pygame.Surface((d.total_w, d.total_h))
        self.bg.fill((10, 13, 34))
        grid_col = (40, 50, 90)
        for x in range(self.cols + 1):
            X = d.board_x + x * d.cell
            pygame.draw.line(self.bg, grid_col, (X, d.board_y), (X, d.board_y + d.board_h))
        for y in range(self.rows + 1):
            Y = d.board_y + y * d.cell
            pygame.draw.line(self.bg, grid_col, (d.board_x, Y), (d.board_x + d.board_w, Y))
        panel = pygame.Rect(d.panel_x, d.board_y, d.panel_w, d.board_h)
        pygame.draw.rect(self.bg, (21, 25, 53), panel)
        pygame.draw.rect(self.bg, (50, 60, 100), panel, 1)
        for y in self._preview_ys():
            frame = pygame.Rect(d.panel_x + 6, y - 6, self.pv_cell * 4 + 12, self.pv_cell * 4 + 12)
            pygame.draw.rect(self.bg, (15, 18, 40), frame)
            pygame.draw.rect(self.bg, (55, 65, 110), frame, 1)

    def _preview_ys(self) -> Tuple[int, int]:
        top = self.layout.board_y + 140
        return top, top + self.pv_cell * 4 + 48

    def _make_cells(self):
        c = self.layout.cell
        self.cell_surf: Dict[PieceType, pygame.Surface] = {}
        for t, col in COLORS.items():
            s = pygame.Surface((c - 2, c - 2))
            s.fill(col)
            self.cell_surf[t] = s
        self.ghost_surf = pygame.Surface((c - 8, c - 8), pygame.SRCALPHA)
        pygame.draw.rect(self.ghost_surf, GHOST_COLOR, (0, 0, c - 8, c - 8), 2)
        self.flash_surf = pygame.Surface((c - 2, c - 2))
        self.flash_surf.fill(CLEAR_FLASH)

    def _preview(self, t: Optional[PieceType]) -> Optional[pygame.Surface]:
        if t is None:
            return None
        s = pygame.Surface((self.pv_cell * 4, self.pv_cell * 4), pygame.SRCALPHA)
        shape = shape_of(t)
        offx = (4 - len(shape[0])) // 2
        offy = max(0, (4 - len(shape)) // 2)
        block = pygame.Surface((self.pv_cell - 2, self.pv_cell - 2))
        block.fill(COLORS[t])
        for y, row in enumerate(shape):
            for x, v in enumerate(row):
                if v:
                    s.blit(block, ((x + offx) * self.pv_cell + 1, (y + offy) * self.pv_cell + 1))
        return s

    # ---------- frame ----------
    def draw(self, screen: pygame.Surface, matrix: Sequence[Sequence[Optional[PieceType]]], snap: Snapshot):
        screen.blit(self.bg, (0, 0))
        d = self.layout
        ox = SHAKE_PX if snap.shake else 0
        pending = set(snap.rows_pending_clear)
        for y, row in enumerate(matrix):
            for x, t in enumerate(row):
                if t is None:
                    continue
                rx = d.board_x + x * d.cell + ox
                ry = d.board_y + y * d.cell
                if y in pending:
                    screen.blit(self.flash_surf, (rx + 1, ry + 1))
                elif t is PieceType.GHOST:
                    screen.blit(self.ghost_surf, (rx + 4, ry + 4))
                else:
                    screen.blit(self.cell_surf[t], (rx + 1, ry + 1))
        self.draw_panel(screen, snap)
        if snap.game_state is GameState.GAME_OVER:
            self._banner(screen, "GAME OVER", "Enter to restart")
        elif snap.game_state is GameState.PAUSE:
            self._banner(screen, "PAUSED", "Enter to resume")

    def draw_panel(self, screen: pygame.Surface, snap: Snapshot):
        d = self.layout
        f = self.font
        if snap.score != self.hud.score:
            self.hud.score = snap.score
            self.hud.score_s = f.render(f"Score: {snap.score}", True, (200, 210, 240))
        if snap.level != self.hud.level:
            self.hud.level = snap.level
            self.hud.level_s = f.render(f"Level: {snap.level}", True, (200, 210, 240))
        if snap.lines != self.hud.lines:
            self.hud.lines = snap.lines
            self.hud.lines_s = f.render(f"Lines: {snap.lines}", True, (200, 210, 240))
        if snap.next_type != self.hud.next_type:
            self.hud.next_type = snap.next_type
            self.hud.next_s = self._preview(snap.next_type)
        if snap.hold_type != self.hud.hold_type:
            self.hud.hold_type = snap.hold_type
            self.hud.hold_s = self._preview(snap.hold_type)

        x = d.panel_x + 12
        for i, surf in enumerate((self.hud.score_s, self.hud.level_s, self.hud.lines_s)):
            screen.blit(surf, (x, d.board_y + 12 + i * 24))
        next_y, hold_y = self._preview_ys()
        screen.blit(f.render("Next:", True, (200, 210, 240)), (x, next_y - 26))
        if self.hud.next_s is not None:
            screen.blit(self.hud.next_s, (x, next_y))
        screen.blit(f.render("Hold:", True, (200, 210, 240)), (x, hold_y - 26))
        if self.hud.hold_s is not None:
            screen.blit(self.hud.hold_s, (x, hold_y))

    def _banner(self, screen: pygame.Surface, title: str, hint: str):
        d = self.layout
        cx, cy = d.board_x + d.board_w // 2, d.board_y + d.board_h // 2
        shade = pygame.Surface((d.board_w, 90), pygame.SRCALPHA)
        shade.fill((20, 25, 40, 220))
        screen.blit(shade, (d.board_x, cy - 45))
        msg = self.big_font.render(title, True, (255, 220, 220))
        screen.blit(msg, msg.get_rect(center=(cx, cy - 12)))
        sub = self.font.render(hint, True, (200, 210, 235))
        screen.blit(sub, sub.get_rect(center=(cx, cy + 22)))

