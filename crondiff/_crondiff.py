# Copyright Red Hat
#
# crondiff/_crondiff.py - Cron job differ global definitions
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Global definitions for the top-level crondiff package.
"""
from typing import Optional, TextIO
import logging
import sys

_log = logging.getLogger("crondiff")

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

# Crondiff debugging subsystem mask
CRONDIFF_DEBUG_JOBDIFF = 1
CRONDIFF_DEBUG_COMMAND = 2
CRONDIFF_DEBUG_LOADER = 4
CRONDIFF_DEBUG_RENDER = 8
CRONDIFF_DEBUG_ALL = (
    CRONDIFF_DEBUG_JOBDIFF
    | CRONDIFF_DEBUG_COMMAND
    | CRONDIFF_DEBUG_LOADER
    | CRONDIFF_DEBUG_RENDER
)

# Crondiff debugging subsystem names
CRONDIFF_SUBSYSTEM_JOBDIFF = "crondiff.jobdiff"
CRONDIFF_SUBSYSTEM_COMMAND = "crondiff.command"
CRONDIFF_SUBSYSTEM_LOADER = "crondiff.loader"
CRONDIFF_SUBSYSTEM_RENDER = "crondiff.render"

_DEBUG_MASK_TO_SUBSYSTEM = {
    CRONDIFF_DEBUG_JOBDIFF: CRONDIFF_SUBSYSTEM_JOBDIFF,
    CRONDIFF_DEBUG_COMMAND: CRONDIFF_SUBSYSTEM_COMMAND,
    CRONDIFF_DEBUG_LOADER: CRONDIFF_SUBSYSTEM_LOADER,
    CRONDIFF_DEBUG_RENDER: CRONDIFF_SUBSYSTEM_RENDER,
}

_debug_subsystems = set()

#: Default label for the first (left hand) side of a comparison.
DEFAULT_LABEL_A = "production"
#: Default label for the second (right hand) side of a comparison.
DEFAULT_LABEL_B = "development"


class SubsystemFilter(logging.Filter):
    """
    Filters DEBUG records based on a set of enabled subsystem names.
    Non-DEBUG records or DEBUG records without a 'subsystem' attribute
    are always passed through.
    """

    def __init__(self, name=""):
        super().__init__(name)
        self.enabled_subsystems = set(_debug_subsystems)

    def filter(self, record):
        # Always pass non-DEBUG messages.
        if record.levelno != logging.DEBUG:
            return True

        # Always pass DEBUG messages that aren't for a specific subsystem.
        if not hasattr(record, "subsystem"):
            return True

        return record.subsystem in self.enabled_subsystems

    def set_debug_subsystems(self, subsystems):
        """Sets the collection of subsystems to allow."""
        self.enabled_subsystems = set(subsystems)


def get_debug_mask():
    """
    Return the current debug mask for the ``crondiff`` package.

    :returns: The current debug mask value
    :rtype: int
    """
    enabled_subsystems = set(_debug_subsystems)
    crondiff_log = logging.getLogger("crondiff")

    for handler in crondiff_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                enabled_subsystems.update(f.enabled_subsystems)

    mask_map = {v: k for k, v in _DEBUG_MASK_TO_SUBSYSTEM.items()}
    mask = 0
    for subsystem_name in enabled_subsystems:
        mask |= mask_map.get(subsystem_name, 0)
    return mask


def set_debug_mask(mask):
    """
    Set the debug mask for the ``crondiff`` package.

    :param mask: the logical OR of the ``CRONDIFF_DEBUG_*``
                 values to log.
    :rtype: None
    """
    # pylint: disable=global-statement
    global _debug_subsystems

    if mask < 0 or mask > CRONDIFF_DEBUG_ALL:
        raise ValueError(f"Invalid crondiff debug mask: {mask}")

    enabled_subsystems = []
    for flag, subsystem_name in _DEBUG_MASK_TO_SUBSYSTEM.items():
        if mask & flag:
            enabled_subsystems.append(subsystem_name)

    crondiff_log = logging.getLogger("crondiff")
    for handler in crondiff_log.handlers:
        for f in handler.filters:
            if isinstance(f, SubsystemFilter):
                f.set_debug_subsystems(enabled_subsystems)

    _debug_subsystems = set(enabled_subsystems)


class ConsoleHandler(logging.StreamHandler):
    """
    A logging handler that writes crondiff log messages to the console.

    Messages go to ``sys.stderr`` by default so that they never interleave
    with report output written to ``sys.stdout``.
    """

    def __init__(self, stream: Optional[TextIO] = None, **kwargs):
        super().__init__(stream=stream or sys.stderr, **kwargs)


#
# Crondiff exception types
#


class CrondiffError(Exception):
    """
    Base class for cron job differ errors.
    """


class CrondiffPathError(CrondiffError):
    """
    A job definition file does not exist or could not be read.
    """


class CrondiffParseError(CrondiffError):
    """
    A job definition document is malformed.
    """


class CrondiffDuplicateError(CrondiffError):
    """
    A job collection contains duplicate job names and the effective
    duplicate policy does not allow them.
    """


class CrondiffArgumentError(CrondiffError):
    """
    An invalid argument was passed to a crondiff API call.
    """


class CrondiffConfigError(CrondiffError):
    """
    The crondiff configuration file is invalid or unreadable.
    """


def parse_labels(value: str):
    """
    Parse a comma separated pair of side labels.

    :param value: A string of the form ``"label_a,label_b"``.
    :type value: ``str``
    :returns: A 2-tuple of stripped, non-empty labels.
    :rtype: ``Tuple[str, str]``
    :raises: ``CrondiffArgumentError`` if ``value`` does not contain exactly
             two non-empty, distinct labels.
    """
    labels = tuple(label.strip() for label in value.split(","))
    if len(labels) != 2 or not all(labels):
        raise CrondiffArgumentError(
            f"Side labels must be two comma separated names: '{value}'"
        )
    if labels[0] == labels[1]:
        raise CrondiffArgumentError(f"Side labels must differ: '{value}'")
    return labels


__all__ = [
    "CRONDIFF_DEBUG_JOBDIFF",
    "CRONDIFF_DEBUG_COMMAND",
    "CRONDIFF_DEBUG_LOADER",
    "CRONDIFF_DEBUG_RENDER",
    "CRONDIFF_DEBUG_ALL",
    # Debug logging - subsystem name interface
    "SubsystemFilter",
    "CRONDIFF_SUBSYSTEM_JOBDIFF",
    "CRONDIFF_SUBSYSTEM_COMMAND",
    "CRONDIFF_SUBSYSTEM_LOADER",
    "CRONDIFF_SUBSYSTEM_RENDER",
    # Debug logging - mask interface
    "set_debug_mask",
    "get_debug_mask",
    "ConsoleHandler",
    # Side labels
    "DEFAULT_LABEL_A",
    "DEFAULT_LABEL_B",
    "parse_labels",
    "CrondiffError",
    "CrondiffPathError",
    "CrondiffParseError",
    "CrondiffDuplicateError",
    "CrondiffArgumentError",
    "CrondiffConfigError",
]
