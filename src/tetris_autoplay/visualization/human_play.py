from __future__ import annotations

import argparse
from typing import Dict, Optional, Sequence

import pygame

from tetris_autoplay.game import GameConfig, GameListener, Intent, TetrisGame
from tetris_autoplay.game.line_clear import ClearResult
from .renderer import Renderer


KEY_TO_INTENT: Dict[int, Intent] = {
    pygame.K_LEFT: Intent.MOVE_LEFT,
    pygame.K_RIGHT: Intent.MOVE_RIGHT,
    pygame.K_DOWN: Intent.SOFT_DROP,
    pygame.K_UP: Intent.HARD_DROP,
    pygame.K_SPACE: Intent.ROTATE,
    pygame.K_a: Intent.TOGGLE_AUTOPLAY,
}

MAX_FRAME_MS = 100


class PygameListener(GameListener):
    def __init__(self, screen: pygame.Surface, renderer: Renderer) -> None:
        self.screen = screen
        self.renderer = renderer
        self.quit_requested = False

    def on_redraw(self, game: TetrisGame) -> None:
        self.renderer.draw(self.screen, game)

    def on_clear_started(self, rows: Sequence[int]) -> None:
        self.renderer.flash_color = None

    def on_clear_step(self, step: int, color: Optional[str]) -> None:
        self.renderer.flash_color = color

    def on_clear_finished(self, result: ClearResult) -> None:
        self.renderer.flash_color = None

    def on_game_over(self, score: int) -> None:
        # Blocks until the player acknowledges; the game resets afterwards.
        self.renderer.draw_message(self.screen, f"Game over! Score: {score}  (press any key)")
        waiting = True
        while waiting:
            event = pygame.event.wait()
            if event.type == pygame.QUIT:
                self.quit_requested = True
                waiting = False
            elif event.type == pygame.KEYDOWN:
                waiting = False


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Play the falling-block game (A toggles autoplay)")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--autoplay", action="store_true", help="Start with autoplay enabled")
    p.add_argument("--cell-size", type=int, default=30)
    p.add_argument("--fps", type=int, default=60)
    return p


def run(argv: Optional[Sequence[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    pygame.init()
    try:
        clock = pygame.time.Clock()
        renderer = Renderer(cell_size=args.cell_size)
        game = TetrisGame(GameConfig(random_seed=args.seed))
        screen = pygame.display.set_mode(renderer.window_size(game))
        pygame.display.set_caption("Tetris Autoplay")
        listener = PygameListener(screen, renderer)
        game.listener = listener

        if args.autoplay:
            game.toggle_autoplay()
        game.start()

        running = True
        while running and not listener.quit_requested:
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in KEY_TO_INTENT:
                        game.press(KEY_TO_INTENT[event.key])
                elif event.type == pygame.KEYUP:
                    if event.key in KEY_TO_INTENT:
                        game.release(KEY_TO_INTENT[event.key])

            # Long frames (window drag, game-over prompt) must not replay a burst of ticks
            game.scheduler.advance(min(clock.tick(args.fps), MAX_FRAME_MS))
        game.stop()
        print(f"Score: {game.score}  level: {game.level}  games played: {game.games_played}")
    finally:
        pygame.quit()


if __name__ == "__main__":  # pragma: no cover
    run()
