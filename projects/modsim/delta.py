# SPDX-License-Identifier: GPL-3.0-or-later
#
# delta.py -- delta modulation
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np

from typing import (
    Final,
    Optional,
)

from galois import GF2
from numpy import ndarray

from errors import InvalidParameter

SAMPLED_SIGNAL: Final[ndarray] = np.array(
    [
        # fmt: off
        +2.0, +1.8, +1.4, +0.8, +0.3, -0.2, -0.7, -1.1, -1.4,
        -1.5, -1.6, -1.5, -1.2, -0.8, -0.3, +0.2, +0.6, +0.9,
        +1.1, +1.3, +1.4, +1.5, +1.6, +1.7, +1.8, +1.9, +2.0,
        # fmt: on
    ]
)


def _check_signal(x: ndarray) -> None:
    if not len(x):
        raise InvalidParameter("Signal must not be empty")


def _check_step(step: float) -> None:
    if not step > 0:
        raise InvalidParameter(f"Step size must be positive: {step}")


def decode(x: GF2, step: float, initial: float = 0.0) -> ndarray:
    _check_step(step)

    direction = 2 * np.array(x, dtype=np.float64) - 1

    return initial + np.cumsum(step * direction)


def encode(x: ndarray, step: float, initial: Optional[float] = None) -> GF2:
    """Linear delta modulation with a fixed step.

    The integrator starts at ``initial`` (the first sample by default) and
    every bit moves it one step towards the input.
    """
    _check_signal(x)
    _check_step(step)

    approximation = x[0] if initial is None else initial

    y = GF2.Zeros(len(x))

    for i, x_i in enumerate(x):
        up = x_i > approximation

        approximation += step if up else -step

        y[i] = int(up)

    return y


def track(x: ndarray, *, gain: float = 0.9) -> tuple[ndarray, ndarray]:
    """Adaptive delta modulation.

    Each step moves the staircase ``gain`` of the way to the next sample.
    Returns the transmitted polar bits (``+1`` up, ``-1`` down, ``0`` for
    the first sample) and the reconstructed staircase.
    """
    if not 0 < gain <= 1:
        raise InvalidParameter(f"Gain must lie in (0, 1]: {gain}")

    _check_signal(x)

    bits = np.zeros(len(x), dtype=np.int8)
    reconstructed = np.zeros(len(x))

    reconstructed[0] = x[0]

    for i in range(1, len(x)):
        diff = x[i] - reconstructed[i - 1]

        delta = gain * np.abs(diff)

        if diff > 0:
            reconstructed[i] = reconstructed[i - 1] + delta
            bits[i] = +1

        else:
            reconstructed[i] = reconstructed[i - 1] - delta
            bits[i] = -1

    return bits, reconstructed
