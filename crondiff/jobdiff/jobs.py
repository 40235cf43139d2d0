# Copyright Red Hat
#
# crondiff/jobdiff/jobs.py - Cron job records and indexes
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Cron job records, command normalization and job indexes.
"""
from typing import Any, Dict, Iterable, List
from collections import Counter
from dataclasses import dataclass
import logging

from crondiff import CRONDIFF_SUBSYSTEM_JOBDIFF

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_jobdiff(msg, *args, **kwargs):
    """A wrapper for jobdiff subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": CRONDIFF_SUBSYSTEM_JOBDIFF}, **kwargs)


@dataclass(frozen=True)
class CronJob:
    """
    A single named scheduled job.
    """

    #: The name identifying this job within its collection
    name: str
    #: The command line executed by this job
    command: str = ""
    #: The schedule expression for this job
    schedule: str = ""

    def __str__(self) -> str:
        """
        Return a human readable string representation of this ``CronJob``.

        :returns: A human readable string.
        :rtype: ``str``
        """
        return (
            f"Name: {self.name}\n"
            f"  command: {self.command}\n"
            f"  schedule: {self.schedule}"
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert this ``CronJob`` object into a dictionary representation
        suitable for encoding as JSON or YAML.

        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        return {
            "name": self.name,
            "command": self.command,
            "schedule": self.schedule,
        }


def normalize_command(command: str) -> str:
    """
    Collapse each run of whitespace in ``command`` into a single space and
    strip leading and trailing whitespace.

    Normalized commands are used for comparison only: the original command
    text is never modified.

    :param command: The command string to normalize.
    :type command: ``str``
    :returns: The normalized command string.
    :rtype: ``str``
    """
    return " ".join(command.split())


def build_name_index(jobs: Iterable[CronJob]) -> Dict[str, CronJob]:
    """
    Build a mapping of job name to ``CronJob`` for ``jobs``.

    If a name appears more than once the later job replaces the earlier one.

    :param jobs: The job collection to index.
    :type jobs: ``Iterable[CronJob]``
    :returns: A dictionary mapping job names to jobs.
    :rtype: ``Dict[str, CronJob]``
    """
    index: Dict[str, CronJob] = {}
    for job in jobs:
        if job.name in index:
            _log_debug_jobdiff("Replacing duplicate job name '%s' in index", job.name)
        index[job.name] = job
    return index


def build_command_index(jobs: Iterable[CronJob]) -> Dict[str, str]:
    """
    Build a mapping of normalized command text to job name for ``jobs``.

    If two jobs share the same normalized command the later job name
    replaces the earlier one.

    :param jobs: The job collection to index.
    :type jobs: ``Iterable[CronJob]``
    :returns: A dictionary mapping normalized commands to job names.
    :rtype: ``Dict[str, str]``
    """
    index: Dict[str, str] = {}
    for job in jobs:
        command = normalize_command(job.command)
        if command in index:
            _log_debug_jobdiff(
                "Replacing job '%s' with '%s' for command '%s' in index",
                index[command],
                job.name,
                command,
            )
        index[command] = job.name
    return index


def find_duplicate_names(jobs: Iterable[CronJob]) -> List[str]:
    """
    Return the sorted list of job names that occur more than once in
    ``jobs``.

    :param jobs: The job collection to inspect.
    :type jobs: ``Iterable[CronJob]``
    :returns: Duplicated job names.
    :rtype: ``List[str]``
    """
    counts = Counter(job.name for job in jobs)
    return sorted(name for name, count in counts.items() if count > 1)
