import argparse
import logging
import random
import sys
from typing import Dict, List, Optional, Tuple

import pygame

from starblazers import (
    Color,
    Command,
    GameConfig,
    GameState,
    apply_command,
    draw_frame,
    handle_key,
    tick,
)

__version__ = "1.0.0"

CAPTION = "StarBlazers Game"
FONT_NAME = "Arial"
LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)

# pygame key codes -> key names understood by starblazers.KEY_BINDINGS
PYGAME_KEYS: Dict[int, str] = {
    pygame.K_s: "s",
    pygame.K_q: "q",
    pygame.K_e: "e",
    pygame.K_r: "r",
    pygame.K_LEFT: "left",
    pygame.K_RIGHT: "right",
    pygame.K_SPACE: "space",
    pygame.K_ESCAPE: "escape",
}


class PygameSurface:
    """Draws the logical shapes from starblazers.draw_frame onto a pygame Surface"""

    def __init__(self, surface: pygame.Surface) -> None:
        self.surface = surface
        self.fonts: Dict[Tuple[int, bool], pygame.font.Font] = {}

    def font(self, size: int, bold: bool = False) -> pygame.font.Font:
        key = (size, bold)
        if key not in self.fonts:
            self.fonts[key] = pygame.font.SysFont(FONT_NAME, size, bold=bold)
        return self.fonts[key]

    def fill(self, color: Color) -> None:
        self.surface.fill(color)

    def fill_rect(self, color: Color, x: float, y: float, w: float, h: float) -> None:
        pygame.draw.rect(self.surface, color, pygame.Rect(int(x), int(y), int(w), int(h)))

    def fill_oval(self, color: Color, x: float, y: float, w: float, h: float) -> None:
        pygame.draw.ellipse(self.surface, color, pygame.Rect(int(x), int(y), int(w), int(h)))

    def text(self, message: str, x: float, y: float, size: int, color: Color,
             bold: bool = False) -> None:
        rendered = self.font(size, bold).render(message, True, color)
        self.surface.blit(rendered, (int(x), int(y)))


class Game:
    def __init__(self, config: Optional[GameConfig] = None, seed: Optional[int] = None):
        pygame.init()
        self.config = config or GameConfig()
        self.screen = pygame.display.set_mode((self.config.width, self.config.height))
        pygame.display.set_caption(CAPTION)
        self.clock = pygame.time.Clock()
        self.canvas = PygameSurface(self.screen)
        self.state = GameState(self.config, random.Random(seed))

    @property
    def fps(self) -> float:
        return 1000 / self.config.tick_ms

    def handle_event(self, event: pygame.event.Event) -> None:
        """Route one pygame event into the game state"""
        if event.type == pygame.QUIT:
            apply_command(self.state, Command.QUIT)
        elif event.type == pygame.KEYDOWN:
            key = PYGAME_KEYS.get(event.key)
            if key is not None:
                handle_key(self.state, key)

    def step(self, events: List[pygame.event.Event]) -> None:
        """Process queued input, advance one tick and redraw"""
        for event in events:
            self.handle_event(event)
            if not self.state.running:
                return

        report = tick(self.state)
        if report.hits or report.life_lost or report.wave_cleared:
            logger.debug("Tick: %s", report)

        draw_frame(self.canvas, self.state)
        pygame.display.flip()

    def run(self) -> None:
        """Main game loop"""
        logger.info("Starting %s at %.0f ticks per second", CAPTION, self.fps)
        try:
            while self.state.running:
                self.step(pygame.event.get())
                self.clock.tick(self.fps)
        finally:
            pygame.quit()
        logger.info("Exited with score %d at level %d", self.state.score, self.state.level)


def setup_logging(level: str = "WARNING") -> logging.Logger:
    """Configure root logging once"""
    if not logging.getLogger().handlers:
        logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    return logger


def parse_args(argv: Optional[List[str]] = None) -> Tuple[argparse.Namespace, GameConfig]:
    parser = argparse.ArgumentParser(
        prog="starblazers",
        description="Play StarBlazers. S starts, arrows move, SPACE fires, "
                    "ESC pauses, E resumes, R restarts, Q quits.",
    )
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for enemy placement")
    parser.add_argument("--tick-ms", type=int, default=GameConfig.tick_ms,
                        help="milliseconds per game tick (default: %(default)s)")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="logging verbosity (default: %(default)s)")
    parser.add_argument("-V", "--version", action="version",
                        version="%(prog)s " + __version__)

    opts = parser.parse_args(argv)
    try:
        config = GameConfig(tick_ms=opts.tick_ms)
    except ValueError as exc:
        parser.error(str(exc))
    return opts, config


def main(argv: Optional[List[str]] = None) -> None:
    opts, config = parse_args(argv)
    setup_logging(opts.log_level)

    try:
        Game(config, opts.seed).run()
    except KeyboardInterrupt:
        sys.exit(1)
    else:
        sys.exit(0)


if __name__ == "__main__":
    main()
