#!/usr/bin/env python3
# SPDX-License-Identifier: GPL-3.0-or-later
#
# simulator.py -- binary keying over AWGN simulator
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import logging
import sys

import numpy as np

import bit

from argparse import ArgumentParser
from pathlib import Path
from typing import (
    Callable,
    Final,
)

from galois import GF2
from numpy import ndarray
from numpy.random import Generator
from scipy.special import erfc
from tqdm import trange

from channel import (
    AWGNChannel,
    Parameters,
)
from modulate import (
    Carrier,
    SCHEMES,
    demodulate,
    modulate,
    signal_power,
)
from sampler import (
    NoiseSource,
    noise_source,
)

logger = logging.getLogger(__name__)

_THEORETICAL_BER: Final[dict[str, Callable[[ndarray], ndarray]]] = {
    # coherent on-off keying
    "ask": lambda ebno: 0.5 * erfc(np.sqrt(ebno / 2)),
    # coherent orthogonal tones
    "fsk": lambda ebno: 0.5 * erfc(np.sqrt(ebno / 2)),
    "psk": lambda ebno: 0.5 * erfc(np.sqrt(ebno)),
}


def awgn(
    source: NoiseSource,
    scheme: str,
    ebno_db: np.double,
    carrier: Carrier = Carrier(),
    *,
    measured: bool = False,
) -> AWGNChannel:
    """Channel at a given Eb/N0 for a keying scheme.

    The noise is scaled to the average power of the scheme, or to the
    power of each frame when `measured` is set.
    """
    return AWGNChannel(
        Parameters(
            method="ebno",
            ebno=ebno_db,
            signal_power=None if measured else signal_power(scheme, carrier),
            samples_per_symbol=carrier.samples,
        ),
        source,
    )


def calculate_ber(value: GF2, expected: GF2) -> float:
    return float(np.mean(np.array(value) != np.array(expected)))


def main() -> None:
    parser = ArgumentParser()

    parser.add_argument(
        "-b",
        "--bits",
        default=64,
        type=int,
    )
    parser.add_argument(
        "-i",
        "--iterations",
        default=64,
        type=int,
    )
    parser.add_argument(
        "-p",
        "--points",
        default=11,
        type=int,
    )
    parser.add_argument(
        "-s",
        "--scheme",
        choices=SCHEMES,
        required=True,
    )
    parser.add_argument(
        "--seed",
        default=0x4D6F6453,
        type=int,
    )
    parser.add_argument(
        "--legacy",
        action="store_true",
    )
    parser.add_argument(
        "--measured",
        action="store_true",
    )
    parser.add_argument(
        "--ebno-min",
        default=0.0,
        type=float,
    )
    parser.add_argument(
        "--ebno-max",
        default=10.0,
        type=float,
    )
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    rng = np.random.default_rng(args.seed)
    source = noise_source(args.seed, legacy=args.legacy)

    logger.info(
        "simulating %s with %s noise",
        args.scheme,
        "legacy" if args.legacy else "modern",
    )

    ebno = np.linspace(args.ebno_min, args.ebno_max, args.points)
    ber = np.zeros((args.points, args.iterations))

    for i in trange(args.points, ncols=80):
        for j in range(args.iterations):
            data, received = sim(
                rng,
                source,
                args.bits,
                args.scheme,
                ebno[i],
                measured=args.measured,
            )
            ber[i, j] = calculate_ber(received, data)

    ber = np.mean(ber, axis=-1)

    output = Path(f"{args.scheme}.csv") if args.output is None else args.output

    np.savetxt(
        output,
        np.array([ebno, ber, theoretical_ber(args.scheme, ebno)]).T,
        header="ebno, ber, theory",
        delimiter=",",
    )

    logger.info("wrote %s", output)


def sim(
    rng: Generator,
    source: NoiseSource,
    bits: int,
    scheme: str,
    ebno_db: np.double,
    carrier: Carrier = Carrier(),
    *,
    measured: bool = False,
) -> tuple[GF2, GF2]:
    channel = awgn(source, scheme, ebno_db, carrier, measured=measured)

    data = bit.bits(rng, bits)

    signal = modulate(data, scheme, carrier)

    received = demodulate(channel(signal), scheme, carrier)

    return data, received


def theoretical_ber(scheme: str, ebno_db: ndarray) -> ndarray:
    try:
        ber = _THEORETICAL_BER[scheme]

    except Exception as _:
        raise KeyError(f"Unsupported scheme: {scheme}")

    return ber(10 ** (np.asarray(ebno_db) / 10))


if __name__ == "__main__":
    sys.exit(main())
