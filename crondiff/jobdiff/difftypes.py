# Copyright Red Hat
#
# crondiff/jobdiff/difftypes.py - Cron job differ diff types
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Cron job diff types
"""
from enum import Enum


class DiffType(Enum):
    """
    Enum for different difference types.

    Declaration order is the order in which records of the same job name
    are reported.
    """

    COMMAND_DIFF = "command_diff"
    SCHEDULE_DIFF = "schedule_diff"
    RENAMED_IN_OTHER = "renamed_in_other"
    MISSING_IN_OTHER = "missing_in_other"


class Side(Enum):
    """
    Enum for the two sides of a comparison.
    """

    A = "a"
    B = "b"

    @property
    def other(self) -> "Side":
        """
        Return the opposite side to this one.
        """
        return Side.B if self == Side.A else Side.A
