# Copyright Red Hat
#
# crondiff/jobdiff/render.py - Cron job differ result renderers
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Renderers for cron job diff results.

Each output format is an independent ``DiffRenderer`` implementation
selected by name with ``RendererFactory.get_renderer()``. Renderers never
affect comparison results: color and layout are presentation only.
"""
from typing import ClassVar, Dict, List, Optional
from dataclasses import dataclass
from abc import ABC, abstractmethod
import logging
import json

from crondiff import CRONDIFF_SUBSYSTEM_RENDER, CrondiffArgumentError
from crondiff.termcontrol import TermControl

from .difftypes import DiffType
from .engine import JobDiffRecord, JobDiffResults
from .options import DiffOptions

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Heading for the job name column of the table format.
NAME_HEADING = "Cron Name"
#: Heading for the difference column of the table format.
DIFF_HEADING = "Difference"
#: Number of spaces between table columns.
COLUMN_GAP = 3
#: Minimum width of the job name column.
MIN_NAME_WIDTH = 10


def _log_debug_render(msg, *args, **kwargs):
    """A wrapper for render subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": CRONDIFF_SUBSYSTEM_RENDER}, **kwargs)


@dataclass(frozen=True)
class DiffTheme:
    """
    Mapping of difference kinds to ``TermControl`` color attribute names.
    """

    #: Color for command differences (warning)
    command: str = "RED"
    #: Color for schedule differences (caution)
    schedule: str = "YELLOW"
    #: Color for missing and renamed jobs (informational)
    info: str = "CYAN"

    def color_for(self, diff_type: DiffType) -> str:
        """
        Return the color attribute name to use for ``diff_type``.

        :param diff_type: The difference kind to look up.
        :type diff_type: ``DiffType``
        :returns: A ``TermControl`` color attribute name.
        :rtype: ``str``
        """
        if diff_type == DiffType.COMMAND_DIFF:
            return self.command
        if diff_type == DiffType.SCHEDULE_DIFF:
            return self.schedule
        return self.info


def describe_record(record: JobDiffRecord, options: DiffOptions) -> List[str]:
    """
    Return the plain text lines describing ``record``.

    :param record: The diff record to describe.
    :type record: ``JobDiffRecord``
    :param options: Options supplying side labels.
    :type options: ``DiffOptions``
    :returns: A list of text lines.
    :rtype: ``List[str]``
    """
    if record.diff_type in (DiffType.COMMAND_DIFF, DiffType.SCHEDULE_DIFF):
        what = "Command" if record.diff_type == DiffType.COMMAND_DIFF else "Schedule"
        return [
            f"{what} difference:",
            f"  {options.label_a}: {record.side_a_value}",
            f"  {options.label_b}: {record.side_b_value}",
        ]

    present = options.label(record.side)
    absent = options.label(record.side.other)
    line = f"Exists in {present} but not in {absent}"
    if record.diff_type == DiffType.RENAMED_IN_OTHER:
        line += f" (found as '{record.other_name}')"
    return [line]


class DiffRenderer(ABC):
    """
    An abstract renderer for ``JobDiffResults``.
    """

    #: The format name for this renderer.
    name: ClassVar[str] = ""

    def __init__(
        self,
        term_control: Optional[TermControl] = None,
        theme: Optional[DiffTheme] = None,
    ):
        """
        Initialise a new renderer.

        :param term_control: An optional ``TermControl`` used for color
                             output. Renderers that do not use color ignore
                             this argument.
        :type term_control: ``Optional[TermControl]``
        :param theme: Colors to use for each kind of difference.
        :type theme: ``Optional[DiffTheme]``
        """
        self.term_control = term_control or TermControl(color="never")
        self.theme = theme or DiffTheme()

    @abstractmethod
    def render(self, results: JobDiffResults) -> str:
        """
        Render ``results`` as a string.

        :param results: The diff results to render.
        :type results: ``JobDiffResults``
        :returns: The rendered output (without a trailing newline).
        :rtype: ``str``
        """


class TableRenderer(DiffRenderer):
    """
    Render results as a two column table of job names and differences.

    All records for a job name share one multi-line cell.
    """

    name = "table"

    def _header(self, results: JobDiffResults) -> List[str]:
        options = results.options
        if results.source_a is None and results.source_b is None:
            return []
        return [
            "Comparing Cron Jobs:",
            f"{options.label_a.capitalize()} File: {results.source_a or ''}",
            f"{options.label_b.capitalize()} File: {results.source_b or ''}",
            "",
        ]

    def _cell(self, records: List[JobDiffRecord], options: DiffOptions) -> List[str]:
        lines = []
        for record in records:
            color = self.theme.color_for(record.diff_type)
            lines.extend(
                self.term_control.colorize(line, color)
                for line in describe_record(record, options)
            )
        return lines

    def render(self, results: JobDiffResults) -> str:
        groups: Dict[str, List[JobDiffRecord]] = {}
        for record in results:
            groups.setdefault(record.job_name, []).append(record)

        width = max(
            [MIN_NAME_WIDTH, len(NAME_HEADING)] + [len(name) for name in groups]
        )
        gap = COLUMN_GAP * " "
        _log_debug_render(
            "Rendering table for %d jobs (name width=%d)", len(groups), width
        )

        lines = self._header(results)
        lines.append(f"{NAME_HEADING:<{width}}{gap}{DIFF_HEADING}")
        lines.append(
            f"{len(NAME_HEADING) * '-':<{width}}{gap}{len(DIFF_HEADING) * '-'}"
        )
        for name, records in groups.items():
            cell = self._cell(records, results.options)
            lines.append(f"{name:<{width}}{gap}{cell[0]}")
            lines.extend(f"{'':<{width}}{gap}{line}" for line in cell[1:])

        if not groups:
            lines.append("No differences found.")

        return "\n".join(line.rstrip() for line in lines)


class JsonRenderer(DiffRenderer):
    """
    Render results as a JSON list of difference records.

    Absent optional values are omitted rather than rendered as ``null``.
    Each record also carries a ``side`` key, in addition to ``job_name``,
    ``kind``, ``side_a_value`` and ``side_b_value``, naming the labelled
    collection the job was found in.
    """

    name = "json"

    def __init__(
        self,
        term_control: Optional[TermControl] = None,
        theme: Optional[DiffTheme] = None,
        pretty: bool = True,
    ):
        super().__init__(term_control=term_control, theme=theme)
        self.pretty = pretty

    def render(self, results: JobDiffResults) -> str:
        return results.json(pretty=self.pretty)


class SummaryRenderer(DiffRenderer):
    """
    Render a count of differences by kind.
    """

    name = "summary"

    def render(self, results: JobDiffResults) -> str:
        tc = self.term_control
        theme = self.theme

        def _count(label: str, diff_type: DiffType, count: int) -> str:
            return f"  {tc.colorize(label, theme.color_for(diff_type))} {count}"

        return "\n".join(
            [
                f"Total differences:     {len(results)}",
                _count(
                    "Command differences: ",
                    DiffType.COMMAND_DIFF,
                    len(results.command_diffs),
                ),
                _count(
                    "Schedule differences:",
                    DiffType.SCHEDULE_DIFF,
                    len(results.schedule_diffs),
                ),
                _count(
                    "Renamed jobs:        ",
                    DiffType.RENAMED_IN_OTHER,
                    len(results.renamed),
                ),
                _count(
                    "Missing jobs:        ",
                    DiffType.MISSING_IN_OTHER,
                    len(results.missing),
                ),
            ]
        )


class RendererFactory:
    """
    A factory for constructing renderer objects.
    """

    #: Map of format names to renderer classes.
    RENDERERS: ClassVar[Dict[str, type]] = {
        cls.name: cls for cls in (TableRenderer, JsonRenderer, SummaryRenderer)
    }

    #: Constant for the names of the output formats
    DIFF_FORMATS: ClassVar[List[str]] = list(RENDERERS)

    @staticmethod
    def get_renderer(
        fmt: str,
        color: str = "auto",
        term_control: Optional[TermControl] = None,
        theme: Optional[DiffTheme] = None,
    ) -> DiffRenderer:
        """
        Return the ``DiffRenderer`` implementation for format ``fmt``.

        :param fmt: The output format name: "table", "json" or "summary".
        :type fmt: ``str``
        :param color: A string to control color rendering: "auto", "always",
                      or "never".
        :type color: ``str``
        :param term_control: An optional ``TermControl`` instance to use for
                             formatting. The supplied instance overrides any
                             ``color`` argument if set.
        :type term_control: ``Optional[TermControl]``
        :param theme: Colors to use for each kind of difference.
        :type theme: ``Optional[DiffTheme]``
        :returns: A renderer for ``fmt``.
        :rtype: ``DiffRenderer``
        :raises: ``CrondiffArgumentError`` for unknown formats.
        """
        if fmt not in RendererFactory.RENDERERS:
            raise CrondiffArgumentError(
                f"Unknown output format '{fmt}' "
                f"(expected one of: {', '.join(RendererFactory.DIFF_FORMATS)})"
            )
        renderer_class = RendererFactory.RENDERERS[fmt]
        if renderer_class is JsonRenderer:
            term_control = term_control or TermControl(color="never")
        else:
            term_control = term_control or TermControl(color=color)
        _log_debug("Selected %s renderer (color=%s)", fmt, color)
        return renderer_class(term_control=term_control, theme=theme)
