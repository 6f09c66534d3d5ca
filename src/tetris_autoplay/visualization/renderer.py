from __future__ import annotations

from typing import Optional, Tuple

import pygame

from tetris_autoplay.game import TetrisGame
from tetris_autoplay.game.pieces import color_for_token


Color = Tuple[int, int, int]

BACKGROUND: Color = (0, 0, 0)
GRID_LINE: Color = (34, 34, 34)
TEXT: Color = (230, 230, 230)
GHOST_ALPHA = 51


def hex_to_rgb(value: str) -> Color:
    value = value.lstrip("#")
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


class Renderer:
    def __init__(self, cell_size: int = 30, margin: int = 20, panel_width: int = 200) -> None:
        self.cell_size = cell_size
        self.margin = margin
        self.panel_width = panel_width
        self.flash_color: Optional[str] = None
        self._font: Optional[pygame.font.Font] = None

    def window_size(self, game: TetrisGame) -> Tuple[int, int]:
        width = game.board.width * self.cell_size + self.margin * 3 + self.panel_width
        height = game.board.height * self.cell_size + self.margin * 2
        return width, height

    @property
    def font(self) -> pygame.font.Font:
        if self._font is None:
            self._font = pygame.font.SysFont(None, 26)
        return self._font

    def _cell_rect(self, x: int, y: int, inset: int = 1) -> pygame.Rect:
        return pygame.Rect(
            self.margin + x * self.cell_size,
            self.margin + y * self.cell_size,
            self.cell_size - inset,
            self.cell_size - inset,
        )

    def _grid_surface(self, game: TetrisGame) -> pygame.Surface:
        board = game.board
        cs = self.cell_size
        surf = pygame.Surface((board.width * cs, board.height * cs))
        surf.fill(BACKGROUND)
        for x in range(board.width + 1):
            pygame.draw.line(surf, GRID_LINE, (x * cs, 0), (x * cs, board.height * cs))
        for y in range(board.height + 1):
            pygame.draw.line(surf, GRID_LINE, (0, y * cs), (board.width * cs, y * cs))

        clearing = set(game.state.clearing_rows)
        for y in range(board.height):
            if y in clearing:
                continue
            for x in range(board.width):
                token = int(board.grid[y, x])
                if token:
                    color = hex_to_rgb(color_for_token(token))
                    pygame.draw.rect(surf, color, pygame.Rect(x * cs, y * cs, cs - 1, cs - 1))
        return surf

    def _draw_piece(self, screen: pygame.Surface, game: TetrisGame) -> None:
        piece = game.piece
        if piece is None or game.state.is_clearing:
            return
        color = hex_to_rgb(piece.color)

        ghost = game.ghost_position()
        if ghost is not None:
            ghost_surf = pygame.Surface((self.cell_size - 1, self.cell_size - 1), pygame.SRCALPHA)
            ghost_surf.fill((*color, GHOST_ALPHA))
            gx, gy = ghost
            for x, y in piece.cells(gx - piece.x, gy - piece.y):
                if y >= 0:
                    screen.blit(ghost_surf, self._cell_rect(x, y))

        for x, y in piece.cells():
            if y >= 0:
                pygame.draw.rect(screen, color, self._cell_rect(x, y))

    def _draw_flash(self, screen: pygame.Surface, game: TetrisGame) -> None:
        if not game.state.is_clearing or self.flash_color is None:
            return
        color = hex_to_rgb(self.flash_color)
        for y in game.state.clearing_rows:
            for x in range(game.board.width):
                pygame.draw.rect(screen, color, self._cell_rect(x, y, inset=0))

    def _draw_hud(self, screen: pygame.Surface, game: TetrisGame) -> None:
        x0 = self.margin * 2 + game.board.width * self.cell_size
        lines = [
            f"Score: {game.score}",
            f"Level: {game.level}",
            f"Autoplay: {'on' if game.autoplay else 'off'}",
        ]
        if game.state.is_clearing:
            lines.append(f"{len(game.state.clearing_rows)} lines clearing!")
        for i, text in enumerate(lines):
            surf = self.font.render(text, True, TEXT)
            screen.blit(surf, (x0, self.margin + i * 30))

    def draw(self, screen: pygame.Surface, game: TetrisGame) -> None:
        screen.fill((10, 10, 14))
        screen.blit(self._grid_surface(game), (self.margin, self.margin))
        self._draw_piece(screen, game)
        self._draw_flash(screen, game)
        self._draw_hud(screen, game)
        pygame.display.flip()

    def draw_message(self, screen: pygame.Surface, text: str) -> None:
        surf = self.font.render(text, True, (255, 255, 255))
        rect = surf.get_rect(center=(screen.get_width() // 2, screen.get_height() // 2))
        backdrop = rect.inflate(24, 16)
        pygame.draw.rect(screen, (20, 25, 40), backdrop)
        screen.blit(surf, rect)
        pygame.display.flip()
