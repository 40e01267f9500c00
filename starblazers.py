from typing import Dict, List, NamedTuple, Optional, Protocol, Sequence, Tuple
from dataclasses import dataclass
from enum import Enum, auto
import logging
import random

import numpy as np

logger = logging.getLogger(__name__)

# Constants
SCREEN_WIDTH = 800
SCREEN_HEIGHT = 600
TICK_MS = 20

SHIP_WIDTH = 60
SHIP_HEIGHT = 40
SHIP_MARGIN = 50
SHIP_STEP = 20
ENEMY_WIDTH = 30
ENEMY_HEIGHT = 30
ENEMY_SPEED = 2
BULLET_WIDTH = 5
BULLET_HEIGHT = 10
BULLET_SPEED = 5

SPAWN_BAND = 200
INITIAL_LIVES = 3
INITIAL_WAVE = 5
WAVE_GROWTH = 2
SCORE_PER_HIT = 10

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)
GREEN = (0, 255, 0)
YELLOW = (255, 255, 0)
BLUE = (0, 0, 255)

Rect = Tuple[float, float, float, float]
Color = Tuple[int, int, int]


@dataclass(frozen=True)
class GameConfig:
    width: int = SCREEN_WIDTH
    height: int = SCREEN_HEIGHT
    ship_width: int = SHIP_WIDTH
    ship_height: int = SHIP_HEIGHT
    ship_margin: int = SHIP_MARGIN
    ship_step: int = SHIP_STEP
    enemy_width: int = ENEMY_WIDTH
    enemy_height: int = ENEMY_HEIGHT
    enemy_speed: int = ENEMY_SPEED
    bullet_width: int = BULLET_WIDTH
    bullet_height: int = BULLET_HEIGHT
    bullet_speed: int = BULLET_SPEED
    spawn_band: int = SPAWN_BAND
    initial_lives: int = INITIAL_LIVES
    initial_wave: int = INITIAL_WAVE
    wave_growth: int = WAVE_GROWTH
    score_per_hit: int = SCORE_PER_HIT
    tick_ms: int = TICK_MS

    def __post_init__(self) -> None:
        positive = ("width", "height", "ship_width", "ship_height", "ship_step",
                    "enemy_width", "enemy_height", "enemy_speed", "bullet_width",
                    "bullet_height", "bullet_speed", "spawn_band", "initial_lives",
                    "initial_wave", "tick_ms")
        for name in positive:
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.ship_width >= self.width:
            raise ValueError("ship_width must be smaller than the field width")
        if self.enemy_width >= self.width:
            raise ValueError("enemy_width must be smaller than the field width")
        if not 0 <= self.ship_margin < self.height:
            raise ValueError("ship_margin must lie inside the field height")
        if self.wave_growth < 0 or self.score_per_hit < 0:
            raise ValueError("wave_growth and score_per_hit cannot be negative")

    @property
    def ship_y(self) -> int:
        return self.height - self.ship_margin

    @property
    def ship_start_x(self) -> int:
        return self.width // 2 - self.ship_width // 2


@dataclass
class Ship:
    x: int
    y: int
    width: int = SHIP_WIDTH
    height: int = SHIP_HEIGHT
    step: int = SHIP_STEP

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.width, self.height)

    def update(self, field_width: int) -> None:
        """Clamp the ship back inside the field"""
        if self.x < 0:
            self.x = 0
        elif self.x > field_width - self.width:
            self.x = field_width - self.width

    def muzzle(self, bullet_width: int) -> Tuple[int, int]:
        """Where a freshly fired bullet starts: centred on the ship, at its top edge"""
        return self.x + self.width // 2 - bullet_width // 2, self.y


@dataclass
class Enemy:
    x: int
    y: int
    width: int = ENEMY_WIDTH
    height: int = ENEMY_HEIGHT
    speed: int = ENEMY_SPEED

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.width, self.height)

    def move(self, field_width: int, field_height: int, rng: random.Random) -> None:
        self.y += self.speed
        # Past the bottom: recycle at the top in a new column
        if self.y > field_height:
            self.y = 0
            self.x = rng.randrange(field_width - self.width)


@dataclass
class Bullet:
    x: int
    y: int
    width: int = BULLET_WIDTH
    height: int = BULLET_HEIGHT
    speed: int = BULLET_SPEED

    @property
    def rect(self) -> Rect:
        return (self.x, self.y, self.width, self.height)

    @property
    def off_screen(self) -> bool:
        return self.y < 0

    def move(self) -> None:
        self.y -= self.speed


def intersects(a: Rect, b: Rect) -> bool:
    """Strict overlap test for two (x, y, w, h) rectangles.

    Rectangles that only share an edge or a corner do not intersect.
    """
    ax, ay, aw, ah = a
    bx, by, bw, bh = b
    return ax < bx + bw and ax + aw > bx and ay < by + bh and ay + ah > by


def overlap_matrix(a_rects: Sequence[Rect], b_rects: Sequence[Rect]) -> np.ndarray:
    """Pairwise intersects() over two rectangle lists, as an (n, m) bool array"""
    a = np.asarray(a_rects, dtype=float).reshape(-1, 4)
    b = np.asarray(b_rects, dtype=float).reshape(-1, 4)
    ax, ay, aw, ah = (a[:, i, np.newaxis] for i in range(4))
    bx, by, bw, bh = (b[np.newaxis, :, i] for i in range(4))
    return (ax < bx + bw) & (ax + aw > bx) & (ay < by + bh) & (ay + ah > by)


def spawn_wave(count: int, config: GameConfig, rng: random.Random) -> List[Enemy]:
    """Create a wave of enemies scattered across the top band of the field"""
    enemies = []
    for _ in range(count):
        x = rng.randrange(config.width - config.enemy_width)
        y = rng.randrange(config.spawn_band)
        enemies.append(Enemy(x, y, config.enemy_width, config.enemy_height,
                             config.enemy_speed))
    return enemies


class GameMode(Enum):
    MENU = auto()
    PLAYING = auto()
    PAUSED = auto()
    GAME_OVER = auto()


class Command(Enum):
    START = auto()
    QUIT = auto()
    PAUSE = auto()
    RESUME = auto()
    RESTART = auto()
    MOVE_LEFT = auto()
    MOVE_RIGHT = auto()
    FIRE = auto()


class GameState:
    def __init__(self, config: Optional[GameConfig] = None,
                 rng: Optional[random.Random] = None) -> None:
        self.config = config or GameConfig()
        self.rng = rng or random.Random()
        self.mode = GameMode.MENU
        self.running = True
        self.score = 0
        self.level = 1
        self.lives = self.config.initial_lives
        self.enemies_to_destroy = self.config.initial_wave
        self.ship = self.new_ship()
        self.bullets: List[Bullet] = []
        self.enemies: List[Enemy] = spawn_wave(self.enemies_to_destroy, self.config, self.rng)

    def new_ship(self) -> Ship:
        """Create a ship centred at the bottom of the field"""
        config = self.config
        return Ship(config.ship_start_x, config.ship_y, config.ship_width,
                    config.ship_height, config.ship_step)

    def reset_wave(self) -> None:
        """Recentre the ship and regenerate the current wave"""
        self.ship = self.new_ship()
        self.bullets = []
        self.enemies = spawn_wave(self.enemies_to_destroy, self.config, self.rng)

    def restart(self) -> None:
        """Initialize or reset all game state variables and start playing"""
        self.score = 0
        self.level = 1
        self.lives = self.config.initial_lives
        self.enemies_to_destroy = self.config.initial_wave
        self.reset_wave()
        self.mode = GameMode.PLAYING

    def fire(self) -> Bullet:
        config = self.config
        x, y = self.ship.muzzle(config.bullet_width)
        bullet = Bullet(x, y, config.bullet_width, config.bullet_height, config.bullet_speed)
        self.bullets.append(bullet)
        return bullet


def on_wave_cleared(state: GameState) -> None:
    """Advance to the next level with a bigger wave"""
    state.level += 1
    state.enemies_to_destroy += state.config.wave_growth
    state.enemies = spawn_wave(state.enemies_to_destroy, state.config, state.rng)
    logger.info("Level %d: %d enemies incoming", state.level, state.enemies_to_destroy)


# Mode transitions driven by commands; PLAYING -> GAME_OVER is driven by tick()
TRANSITIONS: Dict[Tuple[GameMode, Command], GameMode] = {
    (GameMode.MENU, Command.START): GameMode.PLAYING,
    (GameMode.PLAYING, Command.PAUSE): GameMode.PAUSED,
    (GameMode.PAUSED, Command.RESUME): GameMode.PLAYING,
    (GameMode.PAUSED, Command.RESTART): GameMode.PLAYING,
    (GameMode.GAME_OVER, Command.RESTART): GameMode.PLAYING,
}


def apply_command(state: GameState, command: Command) -> None:
    """Apply one command to the game state; commands the mode doesn't accept are no-ops"""
    if command is Command.QUIT:
        logger.info("Quit requested from %s", state.mode.name)
        state.running = False
        return

    if state.mode is GameMode.PLAYING:
        if command is Command.MOVE_LEFT:
            state.ship.x -= state.ship.step
            return
        if command is Command.MOVE_RIGHT:
            state.ship.x += state.ship.step
            return
        if command is Command.FIRE:
            state.fire()
            return

    target = TRANSITIONS.get((state.mode, command))
    if target is None:
        logger.debug("Ignoring %s in %s", command.name, state.mode.name)
        return

    logger.info("%s -> %s", state.mode.name, target.name)
    if command is Command.RESTART:
        state.restart()
    state.mode = target


KEY_BINDINGS: Dict[GameMode, Dict[str, Command]] = {
    GameMode.MENU: {
        "s": Command.START,
        "q": Command.QUIT,
    },
    GameMode.PLAYING: {
        "left": Command.MOVE_LEFT,
        "right": Command.MOVE_RIGHT,
        "space": Command.FIRE,
        "escape": Command.PAUSE,
    },
    GameMode.PAUSED: {
        "e": Command.RESUME,
        "r": Command.RESTART,
        "q": Command.QUIT,
    },
    GameMode.GAME_OVER: {
        "r": Command.RESTART,
        "q": Command.QUIT,
    },
}


def map_key(mode: GameMode, key: str) -> Optional[Command]:
    return KEY_BINDINGS[mode].get(key)


def handle_key(state: GameState, key: str) -> Optional[Command]:
    """Translate a key-down into a command for the current mode and apply it"""
    command = map_key(state.mode, key)
    if command is not None:
        apply_command(state, command)
    return command


class TickReport(NamedTuple):
    hits: int = 0
    life_lost: bool = False
    wave_cleared: bool = False
    game_over: bool = False


def handle_collisions(state: GameState) -> Tuple[int, bool]:
    """Resolve bullet hits and ship crashes; returns (enemies destroyed, life lost)"""
    hits = 0
    if state.bullets and state.enemies:
        overlaps = overlap_matrix([b.rect for b in state.bullets],
                                  [e.rect for e in state.enemies])
        alive = [True] * len(state.enemies)
        spent = set()
        for i, j in zip(*np.nonzero(overlaps)):
            if not alive[j]:
                continue
            alive[j] = False
            spent.add(int(i))
            hits += 1
        if hits:
            state.bullets = [b for i, b in enumerate(state.bullets) if i not in spent]
            state.enemies = [e for j, e in enumerate(state.enemies) if alive[j]]
            state.score += hits * state.config.score_per_hit
            logger.debug("%d enemies destroyed, score %d", hits, state.score)

    # Ship-enemy collisions
    for enemy in state.enemies:
        if intersects(state.ship.rect, enemy.rect):
            state.lives -= 1
            if state.lives > 0:
                logger.info("Ship hit, %d lives left", state.lives)
                state.reset_wave()
            else:
                logger.info("Game over with score %d at level %d", state.score, state.level)
                state.mode = GameMode.GAME_OVER
            return hits, True
    return hits, False


def tick(state: GameState) -> TickReport:
    """Advance the game by one fixed step; does nothing outside PLAYING"""
    if state.mode is not GameMode.PLAYING:
        return TickReport()

    config = state.config
    state.ship.update(config.width)
    for enemy in state.enemies:
        enemy.move(config.width, config.height, state.rng)
    for bullet in state.bullets:
        bullet.move()
    state.bullets = [b for b in state.bullets if not b.off_screen]

    hits, life_lost = handle_collisions(state)
    if state.mode is GameMode.GAME_OVER:
        return TickReport(hits, life_lost, False, True)

    # Check for level completion
    wave_cleared = not state.enemies
    if wave_cleared:
        on_wave_cleared(state)
    return TickReport(hits, life_lost, wave_cleared, False)


class Surface(Protocol):
    def fill(self, color: Color) -> None: ...

    def fill_rect(self, color: Color, x: float, y: float, w: float, h: float) -> None: ...

    def fill_oval(self, color: Color, x: float, y: float, w: float, h: float) -> None: ...

    def text(self, message: str, x: float, y: float, size: int, color: Color,
             bold: bool = False) -> None: ...


def draw_enemy(surface: Surface, enemy: Enemy) -> None:
    # Alien body
    surface.fill_oval(GREEN, enemy.x, enemy.y, enemy.width, enemy.height)

    # Antennas
    centre = enemy.x + enemy.width // 2
    surface.fill_rect(YELLOW, centre - 1, enemy.y - 5, 2, 5)
    surface.fill_rect(YELLOW, centre - 5, enemy.y - 10, 10, 5)


def draw_hud(surface: Surface, state: GameState) -> None:
    lines = [
        f"Score: {state.score}",
        f"Level: {state.level}",
        f"Lives: {state.lives}",
        f"Enemies Left: {len(state.enemies)}",
    ]
    for i, line in enumerate(lines):
        surface.text(line, 10, 20 + i * 20, 16, WHITE)


def draw_menu(surface: Surface, width: int, height: int) -> None:
    surface.text("StarBlazers Game", width / 2 - 200, height / 2 - 60, 40, WHITE, bold=True)
    surface.text("Press S to start", width / 2 - 100, height / 2, 20, WHITE)
    surface.text("Press Q to quit", width / 2 - 100, height / 2 + 30, 20, WHITE)


def draw_pause(surface: Surface, state: GameState) -> None:
    width, height = state.config.width, state.config.height
    surface.text("Game Paused", width / 2 - 120, height / 2 - 30, 30, WHITE, bold=True)
    surface.text(f"Score: {state.score}", width / 2 - 100, height / 2 + 20, 20, WHITE)
    surface.text("Press R to restart", width / 2 - 100, height / 2 + 50, 20, WHITE)
    surface.text("Press Q to quit", width / 2 - 100, height / 2 + 80, 20, WHITE)
    surface.text("Press E to resume", width / 2 - 120, height / 2 + 110, 20, WHITE)


def draw_game_over(surface: Surface, state: GameState) -> None:
    width, height = state.config.width, state.config.height
    surface.text("Game Over", width / 2 - 100, height / 2 - 30, 30, WHITE, bold=True)
    surface.text(f"Final Score: {state.score}", width / 2 - 100, height / 2 + 20, 20, WHITE)
    surface.text("Press R to restart", width / 2 - 100, height / 2 + 50, 20, WHITE)
    surface.text("Press Q to quit", width / 2 - 100, height / 2 + 80, 20, WHITE)


def draw_frame(surface: Surface, state: GameState) -> None:
    """Describe the current frame to the render surface"""
    surface.fill(BLACK)

    if state.mode is GameMode.MENU:
        draw_menu(surface, state.config.width, state.config.height)
    elif state.mode is GameMode.PAUSED:
        draw_pause(surface, state)
    elif state.mode is GameMode.GAME_OVER:
        draw_game_over(surface, state)
    else:
        ship = state.ship
        surface.fill_rect(WHITE, ship.x, ship.y, ship.width, ship.height)
        for enemy in state.enemies:
            draw_enemy(surface, enemy)
        for bullet in state.bullets:
            surface.fill_rect(BLUE, bullet.x, bullet.y, bullet.width, bullet.height)
        draw_hud(surface, state)
