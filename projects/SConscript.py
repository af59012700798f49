# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright (C) 2024  Jacob Koziej <jacobkoziej@gmail.com>

# ruff: noqa: F821

from SCons.Script import (
    Import,
    Return,
    SConscript,
)

Import("env")

report, ber, test = SConscript(
    "modsim/SConscript.py",
    exports=[
        "env",
    ],
)

Return("report", "ber", "test")
