# Copyright Red Hat
#
# crondiff/jobdiff/__init__.py - Cron job differ jobdiff package
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Cron job diff package.

Provides comparison of two cron job collections: name and command indexes,
command normalization, rename detection and result rendering. The main
entry points are ``JobDiffer``, ``DiffOptions`` and ``compare()``.
"""
from .difftypes import DiffType, Side
from .engine import DiffEngine, JobDiffRecord, JobDiffResults, compare
from .jobdiffer import JobDiffer
from .jobs import CronJob, normalize_command
from .loader import load_jobs
from .options import DiffOptions, DuplicatePolicy
from .render import DiffRenderer, DiffTheme, RendererFactory

__all__ = [
    "CronJob",
    "DiffEngine",
    "DiffOptions",
    "DiffRenderer",
    "DiffTheme",
    "DiffType",
    "DuplicatePolicy",
    "JobDiffRecord",
    "JobDiffResults",
    "JobDiffer",
    "RendererFactory",
    "Side",
    "compare",
    "load_jobs",
    "normalize_command",
]
