import random

import pytest

from gridsweep.engine import GameSession, new_session


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def fresh_session(rng):
    return new_session(8, 8, 10, rng=rng)


@pytest.fixture
def corner_mine_session():
    # 5x5 with one mine at (4, 4); the zero region covers everything
    # except the three cells touching that corner
    return GameSession(5, 5, mines={24})
