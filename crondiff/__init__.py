# Copyright Red Hat
#
# crondiff/__init__.py - Cron job differ package initialisation
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Crondiff top-level package.
"""
from ._crondiff import *  # noqa: F401, F403
from ._crondiff import __all__  # noqa: F401

__version__ = "0.1.0"
