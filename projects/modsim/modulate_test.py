# SPDX-License-Identifier: GPL-3.0-or-later
#
# modulate_test.py -- binary carrier keying tests
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np
import pytest

from galois import GF2

from modulate import (
    Carrier,
    demodulate,
    modulate,
    signal_power,
    timebase,
)


@pytest.mark.parametrize("disturbance", [0, 0.1, 0.2])
def test_modulation(
    data: GF2,
    scheme: str,
    carrier: Carrier,
    disturbance: float,
) -> None:
    s = modulate(data, scheme, carrier)

    assert s.shape == (data.size * carrier.samples,)

    r = s + disturbance
    x = demodulate(r, scheme, carrier)

    assert np.all(x == data)


def test_modulation_batch(data: GF2, scheme: str, carrier: Carrier) -> None:
    d = data.reshape(4, -1)

    s = modulate(d, scheme, carrier)

    assert s.shape == (4, d.shape[-1] * carrier.samples)
    assert np.all(demodulate(s, scheme, carrier) == d)


@pytest.mark.parametrize("amplitudes", [(0.0, 1.0), (2.0, 5.0), (5.0, 1.0)])
def test_ask_amplitudes(data: GF2, amplitudes: tuple[float, float]) -> None:
    carrier = Carrier(samples=40, ask_amplitudes=amplitudes)

    s = modulate(data, "ask", carrier)

    assert np.all(demodulate(s, "ask", carrier) == data)

    a0, a1 = amplitudes

    c = np.cos(2 * np.pi * carrier.frequency * carrier.t())

    above = (a0 + a1) / 2 + 0.1 * (a1 - a0)
    below = (a0 + a1) / 2 - 0.1 * (a1 - a0)

    x = np.concatenate([above * c, below * c])

    assert np.all(demodulate(x, "ask", carrier) == GF2([1, 0]))


def test_waveforms(carrier: Carrier) -> None:
    t = carrier.t()

    f0, f1 = (cycles * carrier.bit_rate for cycles in carrier.fsk_cycles)

    c = np.cos(2 * np.pi * carrier.frequency * t)
    c0 = np.cos(2 * np.pi * f0 * t)
    c1 = np.cos(2 * np.pi * f1 * t)

    zero = GF2([0])
    one = GF2([1])

    assert np.allclose(modulate(zero, "ask", carrier), 0)
    assert np.allclose(modulate(one, "ask", carrier), 5 * c)

    assert np.allclose(modulate(zero, "fsk", carrier), c0)
    assert np.allclose(modulate(one, "fsk", carrier), c1)

    assert np.allclose(modulate(zero, "psk", carrier), -c)
    assert np.allclose(modulate(one, "psk", carrier), c)


def test_timebase(data: GF2, carrier: Carrier) -> None:
    t = timebase(data, carrier)

    assert t.shape == (data.size * carrier.samples,)
    assert np.isclose(t[-1], carrier.bit_period * data.size)
    assert np.allclose(np.diff(t), carrier.bit_period / carrier.samples)


@pytest.mark.parametrize(
    "scheme, expected",
    (
        ("ask", 6.25),
        ("fsk", 0.5),
        ("psk", 0.5),
    ),
)
def test_signal_power(carrier: Carrier, scheme: str, expected: float) -> None:
    assert np.isclose(signal_power(scheme, carrier), expected)

    balanced = GF2(np.tile([0, 1], 64))

    s = modulate(balanced, scheme, carrier)

    assert np.isclose(np.mean(s**2), expected)


def test_unsupported_scheme(data: GF2) -> None:
    with pytest.raises(KeyError):
        modulate(data, "qam")

    with pytest.raises(KeyError):
        demodulate(np.zeros(100), "qam")

    with pytest.raises(KeyError):
        signal_power("qam")
