# SPDX-License-Identifier: GPL-3.0-or-later
#
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>

# ruff: noqa: F821

from pathlib import Path

from SCons.Script import (
    Import,
    Return,
)

Import("env")

sources = env.Glob("*.py")

report_raw = env.Jupytext("report-raw.ipynb", "report.py")[0]

report = env.Papermill("report.ipynb", report_raw)[0]
env.Depends(report, sources)

report = env.NbConvert(str(Path(str(report)).with_suffix(".html")), report)

ber = [
    env.Command(
        f"{scheme}.csv",
        "simulator.py",
        f"$PYTHON $SOURCE --scheme={scheme} --output=$TARGET $SIMFLAGS",
    )
    for scheme in ("ask", "fsk", "psk")
]
env.Depends(ber, sources)

test = env.Command(
    "test.log",
    sources,
    "$PYTEST $PYTESTFLAGS --rootdir=${SOURCE.dir} ${SOURCE.dir} > $TARGET",
)
env.AlwaysBuild(test)

Return("report", "ber", "test")
