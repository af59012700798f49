# SPDX-License-Identifier: GPL-3.0-or-later
#
# bit.py -- bit and word manipulation
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np

from typing import Final

from galois import GF2
from numpy import ndarray
from numpy.random import Generator

# IEEE-754 binary64 viewed as (low, high) 32-bit words
_DOUBLE: Final[str] = "<f8"
_WORD: Final[str] = "<u4"

WORD_MASK: Final[int] = 0xFFFFFFFF


def bits(rng: Generator, count: int) -> GF2:
    assert count >= 1

    return GF2.Random(count, seed=rng)


def digitize(x: GF2, samples: int) -> ndarray:
    assert samples >= 1

    return np.repeat(np.array(x, dtype=np.float64), samples, axis=-1)


def double2words(x: ndarray) -> ndarray:
    """View doubles as ``(..., 2)`` words, low mantissa word first.

    The word order is fixed to the little-endian layout regardless of the
    host byte order, so the result is portable.
    """
    x = np.array(x, dtype=_DOUBLE)

    return x.reshape(-1).view(_WORD).reshape(x.shape + (2,))


def undigitize(x: ndarray, samples: int) -> GF2:
    assert samples >= 1
    assert x.shape[-1] % samples == 0

    x = x.reshape(x.shape[:-1] + (-1, samples))

    return GF2((np.mean(x, axis=-1) > 0.5).astype(np.uint8))


def words2double(x: ndarray) -> ndarray:
    assert x.shape[-1] == 2

    x = np.array(x, dtype=_WORD)

    y = x.reshape(-1).view(_DOUBLE).reshape(x.shape[:-1])

    return y.astype(np.float64)


def xorshift(j: ndarray) -> ndarray:
    j = np.array(j, dtype=np.uint32)

    j ^= j << np.uint32(13)
    j ^= j >> np.uint32(17)
    j ^= j << np.uint32(5)

    return j
