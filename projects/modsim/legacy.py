# SPDX-License-Identifier: GPL-3.0-or-later
#
# legacy.py -- legacy-compatible subtract-with-borrow uniform generator
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import logging

import numpy as np

from dataclasses import dataclass
from numbers import (
    Integral,
    Real,
)
from typing import (
    Final,
    Optional,
)

from numpy import ndarray
from numpy.typing import ArrayLike

from errors import (
    CorruptState,
    InvalidParameter,
)
from bit import (
    WORD_MASK,
    double2words,
    words2double,
    xorshift,
)

logger = logging.getLogger(__name__)

REGISTER_SIZE: Final[int] = 32
SENTINEL: Final[int] = 0x80000000

_EXTRACT_BIT: Final[int] = 19
_HIGH_MASK: Final[int] = 0x000FFFFF
_LAG_LONG: Final[int] = 20
_LAG_SHORT: Final[int] = 5
_MANTISSA_BITS: Final[int] = 53
_ULP: Final[float] = 2.0**-_MANTISSA_BITS

_MAGIC: Final[bytes] = b"SWBX"
_VERSION: Final[int] = 1

_HEADER: Final[np.dtype] = np.dtype(
    [
        ("magic", "S4"),
        ("version", "<u2"),
        ("channels", "<u4"),
    ]
)
_RECORD: Final[np.dtype] = np.dtype(
    [
        ("register", "<f8", (REGISTER_SIZE,)),
        ("borrow", "<f8"),
        ("cursor", "<u1"),
        ("shift", "<u4"),
    ]
)


@dataclass(kw_only=True)
class GeneratorState:
    register: ndarray
    borrow: ndarray
    cursor: ndarray
    shift: ndarray

    @property
    def channels(self) -> int:
        return self.register.shape[0]

    def copy(self) -> "GeneratorState":
        return GeneratorState(
            register=self.register.copy(),
            borrow=self.borrow.copy(),
            cursor=self.cursor.copy(),
            shift=self.shift.copy(),
        )


def check_channels(channels: int) -> int:
    if isinstance(channels, bool) or not isinstance(channels, Integral):
        raise InvalidParameter(f"Channel count must be an integer: {channels}")

    if channels < 1:
        raise InvalidParameter(f"Channel count must be positive: {channels}")

    return int(channels)


def check_count(count: int) -> int:
    if isinstance(count, bool) or not isinstance(count, Integral):
        raise InvalidParameter(f"Sample count must be an integer: {count}")

    if count < 1:
        raise InvalidParameter(f"Sample count must be positive: {count}")

    return int(count)


def check_range(low: float, high: float) -> tuple[float, float]:
    for bound in (low, high):
        if isinstance(bound, bool) or not isinstance(bound, Real):
            raise InvalidParameter(f"Range bound must be real: {bound}")

        if not np.isfinite(bound):
            raise InvalidParameter(f"Range bound must be finite: {bound}")

    if low > high:
        raise InvalidParameter(f"Empty range: [{low}, {high}]")

    return float(low), float(high)


def check_seed(seed: ArrayLike, channels: int) -> ndarray:
    """Validate a seed and broadcast it to one ``uint32`` per channel.

    A scalar seed is shared by every channel, a sequence must supply exactly
    one seed per channel. Seeds must be finite nonnegative integers (integral
    floats are accepted) that fit the 32-bit shift register.
    """
    channels = check_channels(channels)

    seed = np.asarray(seed)

    if seed.dtype.kind not in "iuf":
        raise InvalidParameter(f"Seed must be an integer: {seed!r}")

    if seed.ndim > 1 or (seed.ndim == 1 and seed.size != channels):
        raise InvalidParameter(
            f"Expected a scalar seed or {channels} seed(s): {seed!r}"
        )

    if seed.dtype.kind == "f":
        if not np.all(np.isfinite(seed)):
            raise InvalidParameter(f"Seed must be finite: {seed!r}")

        if np.any(seed != np.floor(seed)):
            raise InvalidParameter(f"Seed must be integral: {seed!r}")

    if np.any(seed < 0) or np.any(seed > WORD_MASK):
        raise InvalidParameter(f"Seed out of range: {seed!r}")

    return np.broadcast_to(seed, (channels,)).astype(np.uint32)


def _check_selection(
    state: GeneratorState,
    channels: Optional[ArrayLike],
) -> ndarray:
    if channels is None:
        return np.arange(state.channels)

    index = np.atleast_1d(np.asarray(channels))

    if index.ndim != 1 or not index.size or index.dtype.kind not in "iu":
        raise InvalidParameter(f"Invalid channel selection: {channels!r}")

    if np.any(index < 0) or np.any(index >= state.channels):
        raise InvalidParameter(f"Channel out of range: {channels!r}")

    if np.unique(index).size != index.size:
        raise InvalidParameter(f"Duplicate channel selection: {channels!r}")

    return index.astype(np.intp)


def _whiten(j: ndarray) -> ndarray:
    register = np.zeros((j.size, REGISTER_SIZE))

    for i in range(REGISTER_SIZE):
        d = np.zeros(j.size)

        for _ in range(_MANTISSA_BITS):
            j = xorshift(j)

            d = 2 * d + ((j >> np.uint32(_EXTRACT_BIT)) & np.uint32(1))

        register[:, i] = np.ldexp(d, -_MANTISSA_BITS)

    return register


def draw(
    state: GeneratorState,
    low: float,
    high: float,
    count: int,
    *,
    channels: Optional[ArrayLike] = None,
) -> tuple[ndarray, GeneratorState]:
    """Draw ``count`` uniform samples per selected channel.

    Returns the ``(count, channels)`` samples together with the advanced
    state. The given state is left untouched, as are the channels that are
    not selected.
    """
    low, high = check_range(low, high)
    count = check_count(count)
    index = _check_selection(state, channels)

    state = state.copy()

    rows = np.arange(index.size)

    register = state.register[index]
    borrow = state.borrow[index]
    cursor = state.cursor[index]
    shift = state.shift[index]

    u = np.empty((count, index.size))

    for n in range(count):
        r = register[rows, (cursor + _LAG_LONG) % REGISTER_SIZE]
        r = r - register[rows, (cursor + _LAG_SHORT) % REGISTER_SIZE]
        r = r - borrow

        negative = r < 0

        r[negative] += 1.0
        borrow = np.where(negative, _ULP, 0.0)

        register[rows, cursor] = r
        cursor = (cursor + 1) % REGISTER_SIZE

        shift = xorshift(shift)

        words = double2words(r)

        words[..., 0] ^= shift
        words[..., 1] ^= shift & np.uint32(_HIGH_MASK)

        u[n] = words2double(words)

    state.register[index] = register
    state.borrow[index] = borrow
    state.cursor[index] = cursor
    state.shift[index] = shift

    return low + (high - low) * u, state


def initialize(seed: ArrayLike, channels: int = 1) -> GeneratorState:
    j = check_seed(seed, channels)
    j = np.where(j == 0, np.uint32(SENTINEL), j).astype(np.uint32)

    logger.debug("seeding %d channel(s) from %s", j.size, j)

    return GeneratorState(
        register=_whiten(j),
        borrow=np.zeros(j.size),
        cursor=np.zeros(j.size, dtype=np.intp),
        shift=j,
    )


def reset(seed: ArrayLike, channels: int = 1) -> GeneratorState:
    return initialize(seed, channels)


def restore(blob: bytes) -> GeneratorState:
    if not isinstance(blob, (bytes, bytearray, memoryview)):
        raise CorruptState(f"Unsupported snapshot type: {type(blob)}")

    blob = bytes(blob)

    if len(blob) < _HEADER.itemsize:
        raise CorruptState("Truncated snapshot header")

    header = np.frombuffer(blob, dtype=_HEADER, count=1)[0]

    if header["magic"] != _MAGIC:
        raise CorruptState(f"Bad snapshot magic: {header['magic']!r}")

    if header["version"] != _VERSION:
        raise CorruptState(f"Unsupported snapshot version: {header['version']}")

    channels = int(header["channels"])

    if channels < 1:
        raise CorruptState(f"Bad snapshot channel count: {channels}")

    if len(blob) != _HEADER.itemsize + channels * _RECORD.itemsize:
        raise CorruptState("Snapshot size does not match its channel count")

    records = np.frombuffer(blob, dtype=_RECORD, offset=_HEADER.itemsize)

    register = records["register"].astype(np.float64)
    borrow = records["borrow"].astype(np.float64)
    cursor = records["cursor"].astype(np.intp)
    shift = records["shift"].astype(np.uint32)

    if not np.all(np.isfinite(register)):
        raise CorruptState("Non-finite register cell")

    if np.any(register < 0) or np.any(register >= 1):
        raise CorruptState("Register cell out of range")

    if np.any(np.ldexp(register, _MANTISSA_BITS) % 1):
        raise CorruptState("Register cell off the 2**-53 grid")

    if not np.all((borrow == 0) | (borrow == _ULP)):
        raise CorruptState("Bad borrow")

    if np.any(cursor >= REGISTER_SIZE):
        raise CorruptState("Cursor out of range")

    if np.any(shift == 0):
        raise CorruptState("Zero shift register")

    return GeneratorState(
        register=register,
        borrow=borrow,
        cursor=cursor,
        shift=shift,
    )


def snapshot(state: GeneratorState) -> bytes:
    header = np.array((_MAGIC, _VERSION, state.channels), dtype=_HEADER)

    records = np.zeros(state.channels, dtype=_RECORD)

    records["register"] = state.register
    records["borrow"] = state.borrow
    records["cursor"] = state.cursor
    records["shift"] = state.shift

    return header.tobytes() + records.tobytes()
