from starblazers import BLUE, GREEN, WHITE, Bullet, Enemy, GameMode, draw_frame


class RecordingSurface:
    def __init__(self):
        self.calls = []

    def fill(self, color):
        self.calls.append(("fill", color))

    def fill_rect(self, color, x, y, w, h):
        self.calls.append(("rect", color, x, y, w, h))

    def fill_oval(self, color, x, y, w, h):
        self.calls.append(("oval", color, x, y, w, h))

    def text(self, message, x, y, size, color, bold=False):
        self.calls.append(("text", message))

    def of(self, kind):
        return [c for c in self.calls if c[0] == kind]

    @property
    def messages(self):
        return [c[1] for c in self.of("text")]


def test_frame_starts_with_clear(state):
    surface = RecordingSurface()
    draw_frame(surface, state)
    assert surface.calls[0] == ("fill", (0, 0, 0))


def test_menu_frame(state):
    surface = RecordingSurface()
    draw_frame(surface, state)
    assert surface.messages == ["StarBlazers Game", "Press S to start", "Press Q to quit"]
    assert surface.of("oval") == []


def test_playing_frame_draws_entities_and_hud(playing):
    playing.enemies = [Enemy(100, 100), Enemy(200, 50)]
    playing.bullets = [Bullet(300, 300)]
    playing.score = 30
    surface = RecordingSurface()

    draw_frame(surface, playing)

    rects = surface.of("rect")
    assert rects[0] == ("rect", WHITE, 370, 550, 60, 40)
    assert ("rect", BLUE, 300, 300, 5, 10) in rects
    assert surface.of("oval") == [
        ("oval", GREEN, 100, 100, 30, 30),
        ("oval", GREEN, 200, 50, 30, 30),
    ]
    assert surface.messages == ["Score: 30", "Level: 1", "Lives: 3", "Enemies Left: 2"]


def test_enemy_antenna_sits_above_body(playing):
    playing.enemies = [Enemy(100, 100)]
    playing.bullets = []
    surface = RecordingSurface()

    draw_frame(surface, playing)

    antenna = [c for c in surface.of("rect") if c[1] != WHITE]
    assert [c[2:] for c in antenna] == [(114, 95, 2, 5), (110, 90, 10, 5)]


def test_paused_frame_shows_score(state):
    state.mode = GameMode.PAUSED
    state.score = 40
    surface = RecordingSurface()
    draw_frame(surface, state)
    assert "Game Paused" in surface.messages
    assert "Score: 40" in surface.messages
    assert "Press E to resume" in surface.messages
    assert surface.of("rect") == []


def test_game_over_frame_shows_final_score(state):
    state.mode = GameMode.GAME_OVER
    state.score = 90
    surface = RecordingSurface()
    draw_frame(surface, state)
    assert surface.messages[:2] == ["Game Over", "Final Score: 90"]
    assert "Press R to restart" in surface.messages
