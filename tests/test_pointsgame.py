"""Tests for the pygame window: hit-testing, buttons, keys and dialogs."""

import pygame
from game_state import Marker, Status
from pointsgame import MARKER_RADIUS, STATUS_BANNER, marker_at


def test_marker_at_hits_center():
    markers = [Marker(number=1, location=(100, 50))]
    center = (100 + MARKER_RADIUS, 50 + MARKER_RADIUS)
    assert marker_at(markers, center) == 1


def test_marker_at_misses_outside_circle():
    markers = [Marker(number=1, location=(100, 50))]
    # bounding-box corner lies outside the circle
    assert marker_at(markers, (101, 51)) is None
    assert marker_at(markers, (400, 300)) is None


def test_marker_at_applies_origin():
    markers = [Marker(number=2, location=(0, 0))]
    origin = (55, 270)
    pos = (55 + MARKER_RADIUS, 270 + MARKER_RADIUS)
    assert marker_at(markers, pos, origin) == 2
    assert marker_at(markers, (MARKER_RADIUS, MARKER_RADIUS), origin) is None


def test_marker_at_prefers_topmost():
    """Later markers are drawn over earlier ones."""
    markers = [
        Marker(number=3, location=(10, 10)),
        Marker(number=1, location=(20, 10)),
    ]
    pos = (20 + MARKER_RADIUS, 10 + MARKER_RADIUS)
    assert marker_at(markers, pos) == 1


def test_status_banner_covers_every_status():
    assert set(STATUS_BANNER) == set(Status)
    assert STATUS_BANNER[Status.GAME_OVER][0] == "Game Over"
    assert STATUS_BANNER[Status.ALL_CLEARED][0] == "All Cleared"


def key(code, text=""):
    return pygame.event.Event(pygame.KEYDOWN, key=code, unicode=text)


def marker_center(game, number):
    marker = game.state.marker(number)
    return (
        game.box_rect.x + marker.location[0] + MARKER_RADIUS,
        game.box_rect.y + marker.location[1] + MARKER_RADIUS,
    )


def lose(game):
    game.start_game()
    game.click_marker(game.state.total)
    game.draw()


def test_start_button_starts_game(game):
    game.handle_click(game.primary_button.center)
    assert game.state.status is Status.PLAYING
    assert game.state.total == 5
    assert game.tickers.active("decay")
    assert game.tickers.active("elapsed")


def test_clicking_lowest_marker_advances(game):
    game.start_game()
    # marker 1 is drawn last, so nothing covers it
    game.handle_click(marker_center(game, 1))
    assert game.state.current == 2
    assert game.state.marker(1).clicked


def test_auto_button_only_while_playing(game):
    game.handle_click(game.auto_button.center)
    assert game.state.status is Status.START
    assert not game.state.auto_play
    game.start_game()
    game.handle_click(game.auto_button.center)
    assert game.state.auto_play
    assert game.tickers.active("auto")
    game.handle_click(game.auto_button.center)
    assert not game.state.auto_play
    assert not game.tickers.active("auto")


def test_count_field_editing(game):
    game.handle_click(game.input_rect.center)
    assert game.input_focused
    game.handle_key(key(pygame.K_2, "2"))
    assert game.count_text == "52"
    assert game.state.requested_count == 52
    game.handle_key(key(pygame.K_BACKSPACE))
    assert game.count_text == "5"
    game.handle_key(key(pygame.K_BACKSPACE))
    assert game.count_text == "1"
    assert game.state.requested_count == 1


def test_digits_ignored_without_focus(game):
    game.handle_key(key(pygame.K_7, "7"))
    assert game.count_text == "5"
    assert game.state.requested_count == 5


def test_enter_starts_with_edited_count(game):
    game.handle_click(game.input_rect.center)
    game.handle_key(key(pygame.K_BACKSPACE))
    game.handle_key(key(pygame.K_3, "3"))
    assert game.count_text == "13"
    assert game.handle_key(key(pygame.K_RETURN))
    assert game.state.status is Status.PLAYING
    assert game.state.total == 13
    assert not game.input_focused
    first_id = game.state.game_id
    game.handle_key(key(pygame.K_RETURN))
    assert game.state.game_id == first_id + 1


def test_a_key_toggles_auto_play(game):
    game.handle_key(key(pygame.K_a, "a"))
    assert not game.state.auto_play
    game.start_game()
    game.handle_key(key(pygame.K_a, "a"))
    assert game.state.auto_play
    game.handle_key(key(pygame.K_a, "a"))
    assert not game.state.auto_play


def test_open_modal_captures_clicks(game):
    lose(game)
    assert game.modal_open()
    game_id = game.state.game_id
    game.handle_click(game.primary_button.center)
    game.handle_click(game.input_rect.center)
    assert game.state.game_id == game_id
    assert not game.input_focused
    assert game.state.status is Status.GAME_OVER


def test_modal_close_button(game):
    lose(game)
    game.handle_click(game.modal_buttons["close"].center)
    assert not game.state.show_lose_modal
    assert game.state.status is Status.GAME_OVER
    game.draw()
    assert game.modal_buttons == {}


def test_modal_again_button_restarts(game):
    lose(game)
    game_id = game.state.game_id
    game.handle_click(game.modal_buttons["again"].center)
    assert game.state.status is Status.PLAYING
    assert game.state.game_id == game_id + 1
    assert not game.modal_open()


def test_escape_closes_modal_then_quits(game):
    lose(game)
    assert game.handle_key(key(pygame.K_ESCAPE))
    assert not game.modal_open()
    assert game.handle_key(key(pygame.K_ESCAPE)) is False


def test_win_dialog_uses_game_total(game):
    game.start_game()
    game.edit_count("9")
    for number in range(1, game.state.total + 1):
        game.click_marker(number)
    for _ in range(30):
        game.update(0.1)
    assert game.state.show_win_modal
    assert game.state.total == 5
    game.draw()
    assert set(game.modal_buttons) == {"again", "close"}
