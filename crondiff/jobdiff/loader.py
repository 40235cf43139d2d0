# Copyright Red Hat
#
# crondiff/jobdiff/loader.py - Cron job differ YAML loader
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Load cron job collections from YAML documents.

The expected document layout is::

    cronjobs:
      - name: backup
        command: /usr/local/bin/backup.sh
        schedule: "0 2 * * *"

A missing ``command`` or ``schedule`` is treated as the empty string.
"""
from typing import Any, List
import logging

import yaml

from crondiff import (
    CRONDIFF_SUBSYSTEM_LOADER,
    CrondiffParseError,
    CrondiffPathError,
)

from .jobs import CronJob

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Top-level document key holding the job list.
CRONJOBS_KEY = "cronjobs"

_JOB_FIELDS = ("name", "command", "schedule")


def _log_debug_loader(msg, *args, **kwargs):
    """A wrapper for loader subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": CRONDIFF_SUBSYSTEM_LOADER}, **kwargs)


def _field_str(value: Any) -> str:
    """
    Convert a job field value to a string, mapping ``None`` to "".
    """
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def parse_jobs(data: Any, source: str = "<data>") -> List[CronJob]:
    """
    Convert a decoded job document into a list of ``CronJob`` objects.

    :param data: The decoded document (usually a ``dict``).
    :type data: ``Any``
    :param source: A description of where ``data`` came from, used in
                   error messages.
    :type source: ``str``
    :returns: The jobs in document order.
    :rtype: ``List[CronJob]``
    :raises: ``CrondiffParseError`` if the document structure is invalid.
    """
    if data is None:
        return []
    if not isinstance(data, dict):
        raise CrondiffParseError(
            f"{source}: expected a mapping at top level, "
            f"found {type(data).__name__}"
        )

    entries = data.get(CRONJOBS_KEY)
    if entries is None:
        _log_warn("%s: no '%s' key found", source, CRONJOBS_KEY)
        return []
    if not isinstance(entries, list):
        raise CrondiffParseError(
            f"{source}: '{CRONJOBS_KEY}' must be a list, "
            f"found {type(entries).__name__}"
        )

    jobs = []
    for i, entry in enumerate(entries):
        if not isinstance(entry, dict):
            raise CrondiffParseError(
                f"{source}: {CRONJOBS_KEY}[{i}] must be a mapping, "
                f"found {type(entry).__name__}"
            )
        job = CronJob(**{key: _field_str(entry.get(key)) for key in _JOB_FIELDS})
        _log_debug_loader("Loaded job %s", job)
        jobs.append(job)
    return jobs


def load_jobs(path: str) -> List[CronJob]:
    """
    Load a cron job collection from the YAML file at ``path``.

    :param path: The path to the job definition file.
    :type path: ``str``
    :returns: The jobs in document order.
    :rtype: ``List[CronJob]``
    :raises: ``CrondiffPathError`` if the file cannot be read, or
             ``CrondiffParseError`` if it is not a valid job document.
    """
    _log_debug("Loading cron jobs from '%s'", path)
    try:
        with open(path, "r", encoding="utf8") as fp:
            data = yaml.safe_load(fp)
    except OSError as err:
        raise CrondiffPathError(f"Error reading {path}: {err}") from err
    except (yaml.YAMLError, UnicodeDecodeError) as err:
        raise CrondiffParseError(f"Error parsing {path}: {err}") from err

    jobs = parse_jobs(data, source=path)
    _log_info("Loaded %d cron jobs from '%s'", len(jobs), path)
    return jobs
