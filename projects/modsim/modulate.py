# SPDX-License-Identifier: GPL-3.0-or-later
#
# modulate.py -- binary carrier keying
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np

from dataclasses import dataclass
from typing import (
    Callable,
    Final,
)

from galois import GF2
from numpy import ndarray


@dataclass(frozen=True, kw_only=True)
class Carrier:
    bit_period: float = 0.1
    samples: int = 100

    cycles: int = 10
    fsk_cycles: tuple[int, int] = (5, 10)
    ask_amplitudes: tuple[float, float] = (0.0, 5.0)

    @property
    def bit_rate(self) -> float:
        return 1 / self.bit_period

    @property
    def frequency(self) -> float:
        return self.cycles * self.bit_rate

    def t(self) -> ndarray:
        step = self.bit_period / self.samples

        return step * np.arange(1, self.samples + 1)

    def tone(self, frequency: float, phase: float = 0.0) -> ndarray:
        return np.cos(2 * np.pi * frequency * self.t() + phase)


@dataclass(frozen=True, kw_only=True)
class _Scheme:
    # waveform per bit value, shape (2, samples)
    waveforms: Callable[[Carrier], ndarray]
    decide: Callable[[ndarray, ndarray], ndarray]


def _ask_waveforms(carrier: Carrier) -> ndarray:
    a0, a1 = carrier.ask_amplitudes

    c = carrier.tone(carrier.frequency)

    return np.stack([a0 * c, a1 * c])


def _fsk_waveforms(carrier: Carrier) -> ndarray:
    f0, f1 = (cycles * carrier.bit_rate for cycles in carrier.fsk_cycles)

    return np.stack([carrier.tone(f0), carrier.tone(f1)])


def _psk_waveforms(carrier: Carrier) -> ndarray:
    f = carrier.frequency

    return np.stack([carrier.tone(f, np.pi), carrier.tone(f)])


def _decide_correlation(segments: ndarray, waveforms: ndarray) -> ndarray:
    correlation = segments @ waveforms.T

    return correlation[..., 1] > correlation[..., 0]


def _decide_distance(segments: ndarray, waveforms: ndarray) -> ndarray:
    # nearest waveform, unequal energies
    energy = np.sum(waveforms**2, axis=-1)

    metric = segments @ waveforms.T - energy / 2

    return metric[..., 1] > metric[..., 0]


_SCHEMES: Final[dict[str, _Scheme]] = {
    "ask": _Scheme(waveforms=_ask_waveforms, decide=_decide_distance),
    "fsk": _Scheme(waveforms=_fsk_waveforms, decide=_decide_correlation),
    "psk": _Scheme(waveforms=_psk_waveforms, decide=_decide_correlation),
}

SCHEMES: Final[tuple[str, ...]] = tuple(_SCHEMES)


def _get_scheme(scheme: str) -> _Scheme:
    try:
        mapping = _SCHEMES[scheme]

    except Exception as _:
        raise KeyError(f"Unsupported scheme: {scheme}")

    return mapping


def demodulate(x: ndarray, scheme: str, carrier: Carrier = Carrier()) -> GF2:
    mapping = _get_scheme(scheme)

    assert x.shape[-1] % carrier.samples == 0

    segments = x.reshape(x.shape[:-1] + (-1, carrier.samples))

    bits = mapping.decide(segments, mapping.waveforms(carrier))

    return GF2(bits.astype(np.uint8))


def modulate(x: GF2, scheme: str, carrier: Carrier = Carrier()) -> ndarray:
    mapping = _get_scheme(scheme)

    waveforms = mapping.waveforms(carrier)

    y = waveforms[np.array(x, dtype=np.intp)]

    return y.reshape(y.shape[:-2] + (-1,))


def timebase(x: GF2, carrier: Carrier = Carrier()) -> ndarray:
    step = carrier.bit_period / carrier.samples

    return step * np.arange(1, x.shape[-1] * carrier.samples + 1)


def signal_power(scheme: str, carrier: Carrier = Carrier()) -> float:
    """Average power of equiprobable bits."""
    waveforms = _get_scheme(scheme).waveforms(carrier)

    return float(np.mean(np.mean(waveforms**2, axis=-1)))
