# ---
# jupyter:
#   kernelspec:
#     display_name: Python 3 (ipykernel)
#     language: python
#     name: python3
# ---

# %%
# SPDX-License-Identifier: GPL-3.0-or-later
#
# report.py -- digital modulation over an AWGN channel
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

# %%
import matplotlib.pyplot as plt
import numpy as np

import bit
import delta

from galois import GF2

from modulate import (
    Carrier,
    demodulate,
    modulate,
    timebase,
)
from sampler import noise_source
from simulator import (
    awgn,
    calculate_ber,
    sim,
    theoretical_ber,
)

# %% tags=["parameters"]
ebno = 6.0
legacy = True
seed = 67

# %% [markdown]
# For this project, I simulate the classic binary keying schemes along
# with delta modulation. Every scheme follows the same pipeline: we take
# a short bit sequence, draw it as a digital (NRZ) signal, key a carrier
# with it, pass the carrier through an additive white Gaussian noise
# (AWGN) channel and finally recover the bits with a decision rule.

# %% [markdown]
# # Delta Modulation
#
# Delta modulation encodes the *difference* between consecutive samples
# of an analog signal using a single bit per sample: `1` if the signal
# rose above our running approximation, `0` if it fell below. The
# receiver integrates the bits to rebuild a staircase approximation.
#
# Our first modulator adapts its step to $0.9$ of the observed
# difference, which lets the staircase follow the sampled signal
# closely without overshooting.

# %% tags=["hide-input"]
t = np.arange(delta.SAMPLED_SIGNAL.size)

transmitted, reconstructed = delta.track(delta.SAMPLED_SIGNAL)

fig, ax = plt.subplots(3, 1, figsize=(10, 8), sharex=True)

ax[0].stem(t, np.ones_like(t))
ax[0].set_title("Sampling Function")
ax[0].set_ylim(-0.5, 1.5)

ax[1].plot(t, delta.SAMPLED_SIGNAL, color="blue", label="Analog Signal")
ax[1].step(
    t,
    reconstructed,
    where="post",
    color="red",
    label="Reconstructed Signal",
)
ax[1].set_title("Analog Signal and Reconstructed Signal")
ax[1].set_ylabel("Voltage")
ax[1].legend()

ax[2].stem(t, transmitted)
ax[2].set_title("Transmitted Bits")
ax[2].set_xlabel("Sample")
ax[2].set_ylim(-1.5, 1.5)

for a in ax:
    a.grid(True)

plt.tight_layout()
plt.show()

# %% [markdown]
# A linear delta modulator uses a fixed step instead. As long as the
# signal never moves faster than one step per sample the staircase
# stays within a step of the input; otherwise we run into *slope
# overload*.

# %% tags=["hide-input"]
step = 0.25

bits = delta.encode(delta.SAMPLED_SIGNAL, step)
staircase = delta.decode(bits, step, delta.SAMPLED_SIGNAL[0])

plt.figure(figsize=(10, 3))
plt.plot(t, delta.SAMPLED_SIGNAL, color="blue", label="Analog Signal")
plt.step(t, staircase, where="post", color="red", label=f"Step {step}")
plt.xlabel("Sample")
plt.ylabel("Voltage")
plt.title("Linear Delta Modulation")
plt.legend()
plt.grid(True)
plt.show()

# %% [markdown]
# # AWGN Channel
#
# Our channel adds Gaussian noise whose variance is derived from a
# target $E_b/N_0$. For a real passband signal with $N$ samples per
# symbol and $k$ bits per symbol:
#
# $$
# \mathrm{SNR} = \frac{E_b}{N_0} + 10 \log_{10} k
#     - 10 \log_{10} \frac{N}{2},
# \qquad
# \sigma^2 = \frac{P_{signal}}{10^{\mathrm{SNR} / 10}}.
# $$
#
# $P_{signal}$ is the average power of the scheme over equiprobable
# bits, so a frame that happens to be all zeros still sees the same
# noise.
#
# The noise can come from numpy's modern generator or from a
# legacy-compatible generator: a 32-cell subtract-with-borrow recurrence
# whose outputs have their mantissa whitened by a 32-bit xorshift
# register. The legacy generator reproduces the same noise, bit for bit,
# for a given seed, and its state can be snapshotted and restored.

# %%
carrier = Carrier()

data = GF2([0, 1, 0, 0, 1, 1, 0, 1])

t_bits = timebase(data, carrier)

# %% [markdown]
# # Binary Keying
#
# - **ASK** keys the amplitude of the carrier: bit `1` is sent with
#   amplitude $A_1 = 5$ and bit `0` with $A_0 = 0$.
# - **FSK** keys the frequency: bit `1` is sent at $f_1 = 10 R_b$ and bit
#   `0` at $f_0 = 5 R_b$, an orthogonal pair over one bit period.
# - **PSK** keys the phase: bit `0` is the bit `1` carrier shifted by
#   $\pi$.
#
# The receiver splits the signal into bit periods and correlates every
# segment against the candidate waveforms, picking the nearest one.

# %% tags=["hide-input"]
for scheme in ("ask", "fsk", "psk"):
    modulated = modulate(data, scheme, carrier)
    received = awgn(
        noise_source(seed, legacy=legacy),
        scheme,
        ebno,
        carrier,
    )(modulated)
    demodulated = demodulate(received, scheme, carrier)

    fig, ax = plt.subplots(4, 1, figsize=(10, 10), sharex=True)

    ax[0].plot(t_bits, bit.digitize(data, carrier.samples), linewidth=2.5)
    ax[0].set_title("Transmitting Information as Digital Signal")
    ax[0].set_ylim(-0.5, 1.5)

    ax[1].plot(t_bits, modulated)
    ax[1].set_title(f"{scheme.upper()} Modulated Signal")

    ax[2].plot(t_bits, received, color="gray")
    ax[2].set_title(f"Received Signal ($E_b/N_0$ = {ebno} dB)")

    ax[3].plot(
        t_bits,
        bit.digitize(demodulated, carrier.samples),
        color="red",
        linewidth=2.5,
    )
    ax[3].set_title("Demodulated Signal")
    ax[3].set_ylim(-0.5, 1.5)
    ax[3].set_xlabel("Time (sec)")

    for a in ax:
        a.set_ylabel("Amplitude")
        a.grid(True)

    plt.tight_layout()
    plt.show()

    print(f"{scheme.upper()}: sent {data}, received {demodulated}")

# %% [markdown]
# # Bit Error Rate
#
# Sweeping $E_b/N_0$ we can compare simulated bit error rates against
# their theoretical values. PSK needs half the energy per bit of the
# orthogonal FSK and on-off ASK signals for the same error rate.

# %% tags=["hide-input"]
points = np.linspace(0, 10, 11)

rng = np.random.default_rng(seed)
source = noise_source(seed)

plt.figure(figsize=(8, 6))

for scheme in ("ask", "fsk", "psk"):
    ber = [
        calculate_ber(*sim(rng, source, 4096, scheme, p)[::-1]) for p in points
    ]

    (line,) = plt.semilogy(points, ber, "o", label=f"{scheme.upper()}")

    plt.semilogy(
        points,
        theoretical_ber(scheme, points),
        color=line.get_color(),
    )

plt.xlabel("$E_b/N_0$ (dB)")
plt.ylabel("BER")
plt.title("Bit Error Rate")
plt.ylim(1e-5, 1)
plt.legend()
plt.grid(True, which="both")
plt.show()
