# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

import os
import sys

from SCons.Environment import Environment
from SCons.Script import (
    Alias,
    Default,
    EnsurePythonVersion,
    EnsureSConsVersion,
    SConscript,
)


EnsureSConsVersion(4, 7, 0)
EnsurePythonVersion(3, 12)


env = Environment(
    ENV={
        "PATH": os.environ["PATH"],
        "TERM": os.environ.get("TERM"),
    },
    PYTHON=sys.executable,
    PYTEST=f"{sys.executable} -m pytest",
    PYTESTFLAGS=["-q"],
    SIMFLAGS=["--iterations=128", "--points=21"],
    tools=[
        "default",
        "github.jacobkoziej.scons-tools.Jupyter.NbConvert",
        "github.jacobkoziej.scons-tools.Jupytext",
        "github.jacobkoziej.scons-tools.Papermill",
    ],
)
env.AppendUnique(
    NBCONVERTFLAGS=[
        "--TagRemovePreprocessor.enabled=True",
        "--TagRemovePreprocessor.remove_cell_tags=\"{'parameters'}\"",
        "--to=html",
    ],
)

build = "build"


report, ber, test = SConscript(
    "projects/SConscript.py",
    exports=[
        "env",
    ],
    variant_dir=f"{build}/projects",
)

Alias("ber", ber)
Alias("report", report)
Alias("test", test)

Default(report)
