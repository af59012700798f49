# SPDX-License-Identifier: GPL-3.0-or-later
#
# errors.py -- error kinds
# Copyright (C) 2025  Jacob Koziej <jacobkoziej@gmail.com>


class InvalidParameter(ValueError):
    pass


class CorruptState(ValueError):
    pass
