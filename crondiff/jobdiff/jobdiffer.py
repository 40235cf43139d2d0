# Copyright Red Hat
#
# crondiff/jobdiff/jobdiffer.py - Cron job differ top-level interface
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Top-level jobdiff interface.
"""
from typing import Optional, Sequence
import logging

from crondiff import CrondiffDuplicateError

from .engine import DiffEngine, JobDiffResults
from .jobs import CronJob, find_duplicate_names
from .loader import load_jobs
from .options import DiffOptions, DuplicatePolicy

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


class JobDiffer:
    """
    Top-level interface for generating cron job comparisons.
    """

    def __init__(self, options: Optional[DiffOptions] = None):
        """
        Initialise a new ``JobDiffer`` to compute cron job differences.

        :param options: Options to control this ``JobDiffer`` instance.
        :type options: ``DiffOptions``
        """
        self.options: DiffOptions = options or DiffOptions()
        self.diff_engine: DiffEngine = DiffEngine()

    def _check_duplicates(self, jobs: Sequence[CronJob], label: str):
        """
        Apply the duplicate name policy to ``jobs``.

        :param jobs: The job collection to check.
        :type jobs: ``Sequence[CronJob]``
        :param label: The side label used in messages.
        :type label: ``str``
        :raises: ``CrondiffDuplicateError`` if duplicates are found and the
                 policy is ``DuplicatePolicy.ERROR``.
        """
        duplicates = find_duplicate_names(jobs)
        if not duplicates:
            return
        if self.options.duplicates == DuplicatePolicy.ERROR:
            raise CrondiffDuplicateError(
                f"Duplicate job names in {label}: {', '.join(duplicates)}"
            )
        for name in duplicates:
            _log_warn(
                "Duplicate job name '%s' in %s: using last definition", name, label
            )

    def compare_jobs(
        self, jobs_a: Sequence[CronJob], jobs_b: Sequence[CronJob]
    ) -> JobDiffResults:
        """
        Compare two in-memory job collections and return diff results.

        :param jobs_a: The first (left hand) job collection.
        :type jobs_a: ``Sequence[CronJob]``
        :param jobs_b: The second (right hand) job collection.
        :type jobs_b: ``Sequence[CronJob]``
        :returns: The diff results for the comparison.
        :rtype: ``JobDiffResults``
        """
        self._check_duplicates(jobs_a, self.options.label_a)
        self._check_duplicates(jobs_b, self.options.label_b)
        return self.diff_engine.compute_diff(jobs_a, jobs_b, self.options)

    def compare_files(self, path_a: str, path_b: str) -> JobDiffResults:
        """
        Load and compare two job definition files.

        :param path_a: Path to the first (left hand) job file.
        :type path_a: ``str``
        :param path_b: Path to the second (right hand) job file.
        :type path_b: ``str``
        :returns: The diff results for the comparison.
        :rtype: ``JobDiffResults``
        """
        jobs_a = load_jobs(path_a)
        jobs_b = load_jobs(path_b)
        results = self.compare_jobs(jobs_a, jobs_b)
        results.source_a = path_a
        results.source_b = path_b
        _log_debug(
            "Compared %s and %s: %d differences", path_a, path_b, len(results)
        )
        return results
