# SPDX-License-Identifier: GPL-3.0-or-later
#
# channel.py -- additive white gaussian noise channel
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import logging

import numpy as np

from dataclasses import dataclass
from typing import (
    Callable,
    Final,
    Optional,
)

from numpy import ndarray

from errors import InvalidParameter
from sampler import NoiseSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True, kw_only=True)
class Parameters:
    method: str = "snr"

    snr: float = 10.0
    ebno: float = 10.0
    esno: float = 10.0
    variance: float = 1.0

    signal_power: Optional[float] = 1.0
    samples_per_symbol: int = 1
    bits_per_symbol: int = 1


def _db(x: float) -> float:
    return 10 * np.log10(x)


def _linear(x: float) -> float:
    return 10 ** (x / 10)


def _snr_from_esno(parameters: Parameters, esno: float, real: bool) -> float:
    samples_per_symbol = parameters.samples_per_symbol

    if real:
        samples_per_symbol /= 2

    return esno - _db(samples_per_symbol)


def _snr_from_ebno(parameters: Parameters, real: bool) -> float:
    esno = parameters.ebno + _db(parameters.bits_per_symbol)

    return _snr_from_esno(parameters, esno, real)


_SNR: Final[dict[str, Callable[[Parameters, bool], float]]] = {
    "ebno": _snr_from_ebno,
    "esno": lambda p, real: _snr_from_esno(p, p.esno, real),
    "snr": lambda p, _: p.snr,
}


def _get_snr(method: str) -> Callable[[Parameters, bool], float]:
    try:
        snr = _SNR[method]

    except Exception as _:
        raise KeyError(f"Unsupported noise method: {method}")

    return snr


class AWGNChannel:
    def __call__(self, x: ndarray) -> ndarray:
        x = np.asarray(x)

        if x.ndim not in (1, 2) or not x.shape[0]:
            raise InvalidParameter(f"Unsupported signal shape: {x.shape}")

        y = x.reshape(x.shape[0], -1)

        if y.shape[-1] != self.source.channels:
            raise InvalidParameter(
                f"Signal has {y.shape[-1]} channel(s), "
                f"noise source has {self.source.channels}"
            )

        variance = self.variance(y)

        if np.iscomplexobj(y):
            scale = np.sqrt(variance / 2)

            noise = scale * self.source.standard_normal(y.shape[0])
            noise = noise + 1j * scale * self.source.standard_normal(y.shape[0])

        else:
            noise = np.sqrt(variance) * self.source.standard_normal(y.shape[0])

        return (y + noise).reshape(x.shape)

    def __init__(self, parameters: Parameters, source: NoiseSource) -> None:
        if parameters.method != "variance":
            _ = _get_snr(parameters.method)

        elif parameters.variance <= 0:
            raise InvalidParameter(
                f"Variance must be positive: {parameters.variance}"
            )

        if parameters.signal_power is not None and parameters.signal_power <= 0:
            raise InvalidParameter(
                f"Signal power must be positive: {parameters.signal_power}"
            )

        if parameters.samples_per_symbol < 1:
            raise InvalidParameter(
                "Samples per symbol must be positive: "
                f"{parameters.samples_per_symbol}"
            )

        if parameters.bits_per_symbol < 1:
            raise InvalidParameter(
                "Bits per symbol must be positive: "
                f"{parameters.bits_per_symbol}"
            )

        self.parameters = parameters
        self.source = source

    def snr(self, real: bool = False) -> float:
        parameters = self.parameters

        if parameters.method == "variance":
            raise InvalidParameter("SNR is undefined for the variance method")

        return _get_snr(parameters.method)(parameters, real)

    def variance(
        self,
        x: Optional[ndarray] = None,
        *,
        real: Optional[bool] = None,
    ) -> ndarray:
        """Per-channel noise variance.

        The signal power is measured from ``x`` when it is not configured.
        Whether the signal is real follows ``x`` when given, otherwise
        ``real`` must be passed for the SNR methods.
        """
        parameters = self.parameters

        if parameters.method == "variance":
            return np.asarray(parameters.variance)

        signal_power = parameters.signal_power

        if signal_power is None:
            if x is None:
                raise InvalidParameter("Signal power needs a signal to measure")

            signal_power = np.mean(np.abs(x) ** 2, axis=0)

        if x is not None:
            is_real = not np.iscomplexobj(x)

            if real is not None and real != is_real:
                raise InvalidParameter(
                    f"Signal is {'real' if is_real else 'complex'}, "
                    f"expected {'real' if real else 'complex'}"
                )

            real = is_real

        elif real is None:
            raise InvalidParameter("Signal type needs a signal or `real`")

        snr = self.snr(real)

        logger.debug("snr %.2f dB, signal power %s", snr, signal_power)

        return np.asarray(signal_power / _linear(snr))
