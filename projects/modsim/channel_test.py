# SPDX-License-Identifier: GPL-3.0-or-later
#
# channel_test.py -- additive white gaussian noise channel tests
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import numpy as np
import pytest

from errors import InvalidParameter
from channel import (
    AWGNChannel,
    Parameters,
)
from sampler import noise_source


def _channel(seed: int, channels: int = 1, **kwargs) -> AWGNChannel:
    return AWGNChannel(Parameters(**kwargs), noise_source(seed, channels))


@pytest.mark.parametrize(
    "parameters, real, expected",
    (
        (Parameters(snr=10, signal_power=2), False, 0.2),
        (Parameters(snr=0), True, 1.0),
        (Parameters(method="variance", variance=0.3), False, 0.3),
        (Parameters(method="esno", esno=3, samples_per_symbol=2), False, 1.0),
        (Parameters(method="esno", esno=3, samples_per_symbol=4), True, 1.0),
        (
            Parameters(
                method="ebno",
                ebno=7,
                bits_per_symbol=2,
                samples_per_symbol=4,
            ),
            False,
            10 ** -0.4,
        ),
    ),
)
def test_variance(
    seed: int,
    parameters: Parameters,
    real: bool,
    expected: float,
) -> None:
    channel = AWGNChannel(parameters, noise_source(seed))

    x = np.zeros(8) if real else np.zeros(8, dtype=np.complex128)

    assert np.isclose(channel.variance(x), expected, rtol=1e-2)


def test_measured_power(seed: int) -> None:
    channel = _channel(seed, 2, snr=10, signal_power=None)

    x = np.ones((16, 2), dtype=np.complex128) * np.array([1, 2])

    assert np.allclose(channel.variance(x), [0.1, 0.4])

    with pytest.raises(InvalidParameter):
        channel.variance()


def test_variance_signal_type(seed: int) -> None:
    channel = _channel(seed, method="esno", esno=3, samples_per_symbol=4)

    real = np.zeros(8)
    complex_ = np.zeros(8, dtype=np.complex128)

    assert np.isclose(channel.variance(real=True), channel.variance(real))
    assert np.isclose(channel.variance(real=False), channel.variance(complex_))
    assert np.isclose(
        2 * channel.variance(real=True),
        channel.variance(complex_),
    )

    with pytest.raises(InvalidParameter):
        channel.variance()

    with pytest.raises(InvalidParameter):
        channel.variance(complex_, real=True)

    fixed = _channel(seed, method="variance", variance=0.5)

    assert np.isclose(fixed.variance(), 0.5)


@pytest.mark.parametrize("complex_signal", [False, True])
def test_noise_statistics(seed: int, complex_signal: bool) -> None:
    channel = _channel(seed, method="variance", variance=4.0)

    dtype = np.complex128 if complex_signal else np.float64

    x = np.full(1 << 14, 3.0, dtype=dtype)

    y = channel(x)

    assert y.shape == x.shape
    assert np.iscomplexobj(y) == complex_signal

    noise = y - x

    assert np.isclose(np.var(noise), 4.0, rtol=0.1)

    if complex_signal:
        assert np.isclose(np.var(noise.real), 2.0, rtol=0.1)
        assert np.isclose(np.var(noise.imag), 2.0, rtol=0.1)


def test_legacy_reproducible(seed: int) -> None:
    parameters = Parameters(snr=5)

    x = np.cos(np.linspace(0, 8 * np.pi, 200))

    a = AWGNChannel(parameters, noise_source(seed, legacy=True))(x)
    b = AWGNChannel(parameters, noise_source(seed, legacy=True))(x)

    assert np.array_equal(a, b)
    assert not np.array_equal(a, x)


def test_channels(seed: int) -> None:
    channel = _channel(seed, 3)

    y = channel(np.zeros((32, 3)))

    assert y.shape == (32, 3)

    with pytest.raises(InvalidParameter):
        channel(np.zeros((32, 2)))

    with pytest.raises(InvalidParameter):
        channel(np.zeros(0))


def test_unsupported_method(seed: int) -> None:
    with pytest.raises(KeyError):
        _channel(seed, method="cnr")


@pytest.mark.parametrize(
    "kwargs",
    (
        {"method": "variance", "variance": 0.0},
        {"signal_power": -1.0},
        {"samples_per_symbol": 0},
        {"bits_per_symbol": 0},
    ),
)
def test_invalid_parameters(seed: int, kwargs: dict) -> None:
    with pytest.raises(InvalidParameter):
        _channel(seed, **kwargs)


def test_snr(seed: int) -> None:
    channel = _channel(seed, method="ebno", ebno=4, samples_per_symbol=100)

    assert np.isclose(channel.snr(), -16)
    assert np.isclose(channel.snr(real=True), 4 - 10 * np.log10(50))

    with pytest.raises(InvalidParameter):
        _channel(seed, method="variance").snr()
