# SPDX-License-Identifier: GPL-3.0-or-later
#
# sampler.py -- uniform and gaussian noise sources
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import json

import numpy as np

import legacy

from typing import (
    Optional,
    Protocol,
)

from numpy import ndarray
from numpy.random import Generator
from numpy.typing import ArrayLike

from errors import (
    CorruptState,
    InvalidParameter,
)
from legacy import (
    GeneratorState,
    check_channels,
    check_count,
    check_range,
    check_seed,
)


class NoiseSource(Protocol):
    channels: int

    @property
    def ready(self) -> bool: ...

    def reset(self, seed: ArrayLike) -> None: ...

    def restore(self, blob: bytes) -> None: ...

    def snapshot(self) -> bytes: ...

    def standard_normal(self, count: int) -> ndarray: ...

    def uniform(self, low: float, high: float, count: int) -> ndarray: ...


class LegacyNormal:
    """Bit-exact legacy uniforms, Box-Muller for gaussians."""

    def __init__(self, seed: Optional[ArrayLike] = None, channels: int = 1):
        self.channels = check_channels(channels)

        self._state: Optional[GeneratorState] = None

        if seed is not None:
            self.reset(seed)

    def _require_state(self) -> GeneratorState:
        if self._state is None:
            raise InvalidParameter("Noise source has not been seeded")

        return self._state

    @property
    def ready(self) -> bool:
        return self._state is not None

    def reset(self, seed: ArrayLike) -> None:
        self._state = legacy.reset(seed, self.channels)

    def restore(self, blob: bytes) -> None:
        self._state = None

        state = legacy.restore(blob)

        if state.channels != self.channels:
            raise CorruptState(
                f"Snapshot has {state.channels} channel(s), "
                f"expected {self.channels}"
            )

        self._state = state

    def snapshot(self) -> bytes:
        return legacy.snapshot(self._require_state())

    def standard_normal(self, count: int) -> ndarray:
        count = check_count(count)

        u = self.uniform(0.0, 1.0, 2 * count)

        radius = np.sqrt(-2 * np.log1p(-u[0::2]))

        return radius * np.cos(2 * np.pi * u[1::2])

    def uniform(
        self,
        low: float,
        high: float,
        count: int,
        *,
        channels: Optional[ArrayLike] = None,
    ) -> ndarray:
        samples, self._state = legacy.draw(
            self._require_state(),
            low,
            high,
            count,
            channels=channels,
        )

        return samples


class ModernNormal:
    """One numpy generator per channel."""

    def __init__(self, seed: Optional[ArrayLike] = None, channels: int = 1):
        self.channels = check_channels(channels)

        self._rng: Optional[list[Generator]] = None

        if seed is not None:
            self.reset(seed)

    def _require_rng(self) -> list[Generator]:
        if self._rng is None:
            raise InvalidParameter("Noise source has not been seeded")

        return self._rng

    @property
    def ready(self) -> bool:
        return self._rng is not None

    def reset(self, seed: ArrayLike) -> None:
        seed = check_seed(seed, self.channels)

        self._rng = [np.random.default_rng(int(s)) for s in seed]

    def restore(self, blob: bytes) -> None:
        self._rng = None

        try:
            states = json.loads(bytes(blob))

        except (TypeError, ValueError) as e:
            raise CorruptState(f"Malformed snapshot: {e}") from e

        if not isinstance(states, list) or len(states) != self.channels:
            raise CorruptState("Snapshot does not match the channel count")

        rng = []

        for state in states:
            generator = np.random.default_rng()

            try:
                generator.bit_generator.state = state

            except (KeyError, TypeError, ValueError) as e:
                raise CorruptState(f"Bad generator state: {e}") from e

            rng.append(generator)

        self._rng = rng

    def snapshot(self) -> bytes:
        states = [g.bit_generator.state for g in self._require_rng()]

        return json.dumps(states).encode()

    def standard_normal(self, count: int) -> ndarray:
        count = check_count(count)

        return np.stack(
            [g.standard_normal(count) for g in self._require_rng()],
            axis=-1,
        )

    def uniform(self, low: float, high: float, count: int) -> ndarray:
        low, high = check_range(low, high)
        count = check_count(count)

        return np.stack(
            [g.uniform(low, high, count) for g in self._require_rng()],
            axis=-1,
        )


def noise_source(
    seed: Optional[ArrayLike] = None,
    channels: int = 1,
    *,
    legacy: bool = False,
) -> NoiseSource:
    if legacy:
        return LegacyNormal(seed, channels)

    return ModernNormal(seed, channels)
