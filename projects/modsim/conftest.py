# SPDX-License-Identifier: GPL-3.0-or-later
#
# conftest.py -- pytest configuration
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np
import pytest

from galois import GF2
from numpy.random import Generator
from pytest import FixtureRequest

import bit

from modulate import Carrier


@pytest.fixture(scope="session")
def carrier() -> Carrier:
    return Carrier()


@pytest.fixture
def data(rng: Generator, random_count: int) -> GF2:
    return bit.bits(rng, random_count)


@pytest.fixture(scope="session")
def random_count() -> int:
    return 256


@pytest.fixture
def rng(seed) -> Generator:
    return np.random.default_rng(seed)


@pytest.fixture(params=["ask", "fsk", "psk"], scope="session")
def scheme(request: FixtureRequest) -> str:
    return request.param


@pytest.fixture(scope="session")
def seed() -> int:
    return 0xBB485B7A
