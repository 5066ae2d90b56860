import random

import pytest

from linetrainer.repertoire import build_repertoire
from linetrainer.tests import FakeAnalysis, make_index


@pytest.fixture()
def rng():
    return random.Random(1234)


@pytest.fixture()
def repertoire():
    return build_repertoire()


@pytest.fixture()
def fake_analysis():
    return FakeAnalysis()


@pytest.fixture()
def white_index():
    return make_index(
        ("a", "Line A", "1. e4 e5 2. Nf3", "w"),
        ("b", "Line B", "1. e4 e5 2. Bc4", "w"),
        ("c", "Line C", "1. e4 c5 2. Nf3", "w"),
    )


@pytest.fixture()
def no_move_delay(settings):
    settings.COMPUTER_MOVE_DELAY_MS = 0
