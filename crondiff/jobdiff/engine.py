# Copyright Red Hat
#
# crondiff/jobdiff/engine.py - Cron job differ diff engine
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Cron job diff engine
"""
from typing import Any, Dict, Iterator, List, Optional, Sequence
import logging
import json

from crondiff import CRONDIFF_SUBSYSTEM_JOBDIFF

from .difftypes import DiffType, Side
from .jobs import CronJob, build_command_index, build_name_index, normalize_command
from .options import DiffOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Position of each ``DiffType`` in report order.
_DIFF_TYPE_ORDER = {diff_type: i for i, diff_type in enumerate(DiffType)}


def _log_debug_jobdiff(msg, *args, **kwargs):
    """A wrapper for jobdiff subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": CRONDIFF_SUBSYSTEM_JOBDIFF}, **kwargs)


class JobDiffRecord:
    """
    Represents a single difference between two cron job collections.
    """

    def __init__(
        self,
        job_name: str,
        diff_type: DiffType,
        side_a_value: Optional[str] = None,
        side_b_value: Optional[str] = None,
        side: Side = Side.A,
    ):
        """
        Initialise a new ``JobDiffRecord`` object.

        :param job_name: The name of the job this record describes.
        :type job_name: ``str``
        :param diff_type: The diff type for this diff record.
        :type diff_type: ``DiffType``
        :param side_a_value: The value from the first collection, if any.
        :type side_a_value: ``Optional[str]``
        :param side_b_value: The value from the second collection, if any.
        :type side_b_value: ``Optional[str]``
        :param side: The collection in which ``job_name`` was found.
        :type side: ``Side``
        """
        self.job_name = job_name
        self.diff_type = diff_type
        self.side_a_value = side_a_value
        self.side_b_value = side_b_value
        self.side = side

    @property
    def kind(self) -> DiffType:
        """
        The kind of difference described by this record (an alias for
        ``diff_type``).
        """
        return self.diff_type

    @property
    def other_name(self) -> Optional[str]:
        """
        The name under which a renamed job was found in the other
        collection, or ``None`` for other diff types.
        """
        if self.diff_type != DiffType.RENAMED_IN_OTHER:
            return None
        return self.side_b_value if self.side == Side.A else self.side_a_value

    def sort_key(self):
        """
        Return the key used to order diff records: job name, then diff type,
        then side.
        """
        return (self.job_name, _DIFF_TYPE_ORDER[self.diff_type], self.side.value)

    def __eq__(self, other) -> bool:
        if not isinstance(other, JobDiffRecord):
            return NotImplemented
        return (
            self.job_name == other.job_name
            and self.diff_type == other.diff_type
            and self.side_a_value == other.side_a_value
            and self.side_b_value == other.side_b_value
            and self.side == other.side
        )

    def __hash__(self):
        return hash(
            (
                self.job_name,
                self.diff_type,
                self.side_a_value,
                self.side_b_value,
                self.side,
            )
        )

    def __repr__(self) -> str:
        return (
            f"JobDiffRecord({self.job_name!r}, {self.diff_type}, "
            f"side_a_value={self.side_a_value!r}, "
            f"side_b_value={self.side_b_value!r}, side={self.side})"
        )

    def __str__(self) -> str:
        """
        Return a string representation of this ``JobDiffRecord`` object.

        :returns: A human readable representation of this ``JobDiffRecord``.
        :rtype: ``str``
        """
        side_a = f"\n  side_a_value: {self.side_a_value}" if self.side_a_value else ""
        side_b = f"\n  side_b_value: {self.side_b_value}" if self.side_b_value else ""
        return (
            f"Name: {self.job_name}\n"
            f"  diff_type: {self.diff_type.value}\n"
            f"  side: {self.side.value}"
            f"{side_a}{side_b}"
        )

    def to_dict(self, options: Optional[DiffOptions] = None) -> Dict[str, Any]:
        """
        Convert this ``JobDiffRecord`` object into a dictionary representation
        suitable for encoding as JSON. Absent values are omitted.

        :param options: Options supplying side labels. When ``None`` the
                        side is reported as "a" or "b".
        :type options: ``Optional[DiffOptions]``
        :returns: A dictionary mapping this instance's keys to values.
        :rtype: ``Dict[str, Any]``
        """
        out = {
            "job_name": self.job_name,
            "kind": self.diff_type.value,
            "side": options.label(self.side) if options else self.side.value,
        }
        if self.side_a_value is not None:
            out["side_a_value"] = self.side_a_value
        if self.side_b_value is not None:
            out["side_b_value"] = self.side_b_value
        return out


class JobDiffResults:
    """Container for cron job diff results."""

    def __init__(
        self,
        records: List[JobDiffRecord],
        options: DiffOptions,
        source_a: Optional[str] = None,
        source_b: Optional[str] = None,
    ):
        self._records = records
        self.options = options
        #: Where the first collection was loaded from, if known
        self.source_a = source_a
        #: Where the second collection was loaded from, if known
        self.source_b = source_b

    def __repr__(self) -> str:
        """
        Return a machine-readable representation of this instance.

        :returns: ``JobDiffResults`` constructor style string.
        :rtype: ``str``
        """
        return (
            f"JobDiffResults([...], {self.options!r}, "
            f"{self.source_a!r}, {self.source_b!r})"
        )

    # List-like interface
    def __iter__(self) -> Iterator[JobDiffRecord]:
        """
        Implement iter(self).
        """
        return iter(self._records)

    def __len__(self):
        """
        Implement len(self).
        """
        return len(self._records)

    def __getitem__(self, index: int) -> JobDiffRecord:
        """
        Return self[index]

        :param index: The index to return.
        :type index: ``int``
        """
        return self._records[index]

    def _of_type(self, diff_type: DiffType) -> List[JobDiffRecord]:
        return [r for r in self._records if r.diff_type == diff_type]

    # Summary properties
    @property
    def command_diffs(self) -> List[JobDiffRecord]:
        """
        Return command differences in this ``JobDiffResults`` instance.

        :returns: Records with ``DiffType.COMMAND_DIFF`` type.
        :rtype: ``List[JobDiffRecord]``
        """
        return self._of_type(DiffType.COMMAND_DIFF)

    @property
    def schedule_diffs(self) -> List[JobDiffRecord]:
        """
        Return schedule differences in this ``JobDiffResults`` instance.

        :returns: Records with ``DiffType.SCHEDULE_DIFF`` type.
        :rtype: ``List[JobDiffRecord]``
        """
        return self._of_type(DiffType.SCHEDULE_DIFF)

    @property
    def renamed(self) -> List[JobDiffRecord]:
        """
        Return renamed jobs in this ``JobDiffResults`` instance.

        :returns: Records with ``DiffType.RENAMED_IN_OTHER`` type.
        :rtype: ``List[JobDiffRecord]``
        """
        return self._of_type(DiffType.RENAMED_IN_OTHER)

    @property
    def missing(self) -> List[JobDiffRecord]:
        """
        Return missing jobs in this ``JobDiffResults`` instance.

        :returns: Records with ``DiffType.MISSING_IN_OTHER`` type.
        :rtype: ``List[JobDiffRecord]``
        """
        return self._of_type(DiffType.MISSING_IN_OTHER)

    def names(self) -> List[str]:
        """
        Return the unique job names with differences, in report order.

        :returns: Job name list.
        :rtype: ``List[str]``
        """
        return list(dict.fromkeys(record.job_name for record in self._records))

    def to_dicts(self) -> List[Dict[str, Any]]:
        """
        Return a list of dictionary representations of the records in this
        instance.

        :returns: A list of record dictionaries.
        :rtype: ``List[Dict[str, Any]]``
        """
        return [record.to_dict(self.options) for record in self._records]

    def json(self, pretty: bool = False) -> str:
        """
        Return JSON representation of ``JobDiffRecord`` content for this
        instance.

        :param pretty: Indent JSON to be human readable.
        :type pretty: ``bool``
        :returns: JSON string description of cron job differences.
        :rtype: ``str``
        """
        return json.dumps(self.to_dicts(), indent=2 if pretty else None)


class DiffEngine:
    """
    Core class for generating cron job comparisons.
    """

    @staticmethod
    def _compare_common(
        job_a: CronJob, job_b: CronJob, diffs: List[JobDiffRecord]
    ) -> None:
        """
        Compare two jobs with the same name, appending any differences to
        ``diffs``.
        """
        if normalize_command(job_a.command) != normalize_command(job_b.command):
            diffs.append(
                JobDiffRecord(
                    job_a.name, DiffType.COMMAND_DIFF, job_a.command, job_b.command
                )
            )
        if job_a.schedule != job_b.schedule:
            diffs.append(
                JobDiffRecord(
                    job_a.name, DiffType.SCHEDULE_DIFF, job_a.schedule, job_b.schedule
                )
            )

    @staticmethod
    def _unmatched(
        job: CronJob, side: Side, other_commands: Dict[str, str]
    ) -> JobDiffRecord:
        """
        Classify a job that has no same-named counterpart in the other
        collection as renamed (matched by command) or missing.

        The exact command text is looked up against the normalized keys of
        ``other_commands``.
        """
        other_name = other_commands.get(job.command)
        if other_name is None:
            return JobDiffRecord(job.name, DiffType.MISSING_IN_OTHER, side=side)
        _log_debug_jobdiff(
            "Job '%s' found in other collection as '%s'", job.name, other_name
        )
        if side == Side.A:
            return JobDiffRecord(
                job.name, DiffType.RENAMED_IN_OTHER, side_b_value=other_name, side=side
            )
        return JobDiffRecord(
            job.name, DiffType.RENAMED_IN_OTHER, side_a_value=other_name, side=side
        )

    def compute_diff(
        self,
        jobs_a: Sequence[CronJob],
        jobs_b: Sequence[CronJob],
        options: Optional[DiffOptions] = None,
    ) -> JobDiffResults:
        """
        Main diff computation logic.

        :param jobs_a: The first job collection to compare.
        :type jobs_a: ``Sequence[CronJob]``
        :param jobs_b: The second job collection to compare.
        :type jobs_b: ``Sequence[CronJob]``
        :param options: Options to apply to the diff generation.
        :type options: ``DiffOptions``
        :returns: A ``JobDiffResults`` instance containing ``JobDiffRecord``
                  objects sorted by job name and diff type.
        :rtype: ``JobDiffResults``
        """
        if options is None:
            options = DiffOptions()

        names_a = build_name_index(jobs_a)
        names_b = build_name_index(jobs_b)
        commands_a = build_command_index(jobs_a)
        commands_b = build_command_index(jobs_b)
        _log_debug(
            "Starting compute_diff with %d/%d jobs", len(names_a), len(names_b)
        )

        diffs: List[JobDiffRecord] = []
        for name, job_a in names_a.items():
            _log_debug_jobdiff("Comparing job '%s'", name)
            job_b = names_b.get(name)
            if job_b is not None:
                self._compare_common(job_a, job_b, diffs)
            else:
                diffs.append(self._unmatched(job_a, Side.A, commands_b))

        for name, job_b in names_b.items():
            if name not in names_a:
                diffs.append(self._unmatched(job_b, Side.B, commands_a))

        diffs.sort(key=JobDiffRecord.sort_key)
        _log_debug("Found %d differences", len(diffs))
        return JobDiffResults(diffs, options)


def compare(
    jobs_a: Sequence[CronJob], jobs_b: Sequence[CronJob]
) -> List[JobDiffRecord]:
    """
    Compare two cron job collections.

    :param jobs_a: The first job collection to compare.
    :type jobs_a: ``Sequence[CronJob]``
    :param jobs_b: The second job collection to compare.
    :type jobs_b: ``Sequence[CronJob]``
    :returns: A sorted list of differences.
    :rtype: ``List[JobDiffRecord]``
    """
    return list(DiffEngine().compute_diff(jobs_a, jobs_b))
