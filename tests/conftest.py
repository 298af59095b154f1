import os
import random
import sys

import pytest

# Ensure pygame can initialize without a physical display/audio device.
os.environ.setdefault('SDL_VIDEODRIVER', 'dummy')
os.environ.setdefault('SDL_AUDIODRIVER', 'dummy')
os.environ.setdefault('PYGAME_HIDE_SUPPORT_PROMPT', '1')

# Ensure the repository root (containing the game modules) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
REPO_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if REPO_ROOT not in sys.path:
    sys.path.insert(0, REPO_ROOT)

from game_state import GameController


@pytest.fixture()
def controller():
    return GameController(rng=random.Random(0))


@pytest.fixture()
def playing(controller):
    controller.start_game(3)
    return controller


@pytest.fixture()
def game(controller):
    import pygame
    from pointsgame import PointsGame

    window = PointsGame(controller)
    yield window
    pygame.quit()
