# Copyright Red Hat
#
# crondiff/command.py - Cron job differ command interface
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""The ``crondiff.command`` module provides both the crondiff command line
interface infrastructure, and a simple procedural interface to the
``crondiff`` library modules.

The procedural interface is used by the ``crondiff`` command line tool,
and may be used by application programs, or interactively in the
Python shell by users who do not require all the features present
in the crondiff object API.
"""
from argparse import ArgumentParser
from os.path import basename
from typing import Optional, TextIO
import logging
import sys
import os

from crondiff import (
    CRONDIFF_DEBUG_JOBDIFF,
    CRONDIFF_DEBUG_COMMAND,
    CRONDIFF_DEBUG_LOADER,
    CRONDIFF_DEBUG_RENDER,
    CRONDIFF_DEBUG_ALL,
    CRONDIFF_SUBSYSTEM_COMMAND,
    ConsoleHandler,
    SubsystemFilter,
    set_debug_mask,
    __version__,
)
from crondiff.config import CRONDIFF_CFG_FILE, CrondiffConfig
from crondiff.termcontrol import COLOR_MODES, TermControl

from .jobdiff import (
    DiffOptions,
    DuplicatePolicy,
    JobDiffer,
    JobDiffResults,
    RendererFactory,
)

DIFF_FORMATS = RendererFactory.DIFF_FORMATS

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


def _log_debug_command(msg, *args, **kwargs):
    """A wrapper for command subsystem debug logs."""
    _log.debug(msg, *args, extra={"subsystem": CRONDIFF_SUBSYSTEM_COMMAND}, **kwargs)


_DEFAULT_LOG_LEVEL = logging.WARNING
_CONSOLE_HANDLER = None


def _flush_with_broken_pipe_guard(stream: TextIO) -> None:
    """
    Handle ``BrokenPipeError`` when attempting to flush output streams.

    :param stream: The stream to flush.
    :type stream: TextIO
    """
    if stream is None or not hasattr(stream, "flush"):
        return
    try:
        stream.flush()
    except BrokenPipeError as err:
        devnull = os.open(os.devnull, os.O_WRONLY)
        try:
            if hasattr(stream, "fileno"):
                os.dup2(devnull, stream.fileno())
        finally:
            os.close(devnull)
        raise SystemExit() from err


def diff_files(
    path_a: str, path_b: str, options: Optional[DiffOptions] = None
) -> JobDiffResults:
    """
    Compare the cron job definition files at ``path_a`` and ``path_b``.

    :param path_a: Path to the first (production) job file.
    :type path_a: ``str``
    :param path_b: Path to the second (development) job file.
    :type path_b: ``str``
    :param options: Options to control the comparison.
    :type options: ``Optional[DiffOptions]``
    :returns: The differences found.
    :rtype: ``JobDiffResults``
    """
    differ = JobDiffer(options=options)
    return differ.compare_files(path_a, path_b)


def print_diffs(
    results: JobDiffResults,
    output_format: str = "table",
    color: str = "auto",
    term_control: Optional[TermControl] = None,
    out: Optional[TextIO] = None,
):
    """
    Render ``results`` in ``output_format`` and write them to ``out``.

    :param results: The diff results to print.
    :type results: ``JobDiffResults``
    :param output_format: The output format name.
    :type output_format: ``str``
    :param color: A string to control color rendering: "auto", "always", or
                  "never".
    :type color: ``str``
    :param term_control: An optional ``TermControl`` instance to use for
                         formatting. The supplied instance overrides any
                         ``color`` argument if set.
    :type term_control: ``Optional[TermControl]``
    :param out: The stream to write to (default ``sys.stdout``).
    :type out: ``Optional[TextIO]``
    """
    out = out or sys.stdout
    term_control = term_control or TermControl(term_stream=out, color=color)
    renderer = RendererFactory.get_renderer(
        output_format, color=color, term_control=term_control
    )
    print(renderer.render(results), file=out)
    _flush_with_broken_pipe_guard(out)


def _merge_config(cmd_args, config: CrondiffConfig):
    """
    Fill in unset command line arguments from ``config``.

    :param cmd_args: The parsed command line arguments.
    :param config: The loaded configuration.
    :type config: ``CrondiffConfig``
    """
    if cmd_args.json:
        cmd_args.format = "json"
    if cmd_args.format is None:
        cmd_args.format = config.format
    if cmd_args.color is None:
        cmd_args.color = config.color
    if cmd_args.labels is None:
        cmd_args.labels = ",".join(config.labels)
    if cmd_args.duplicates is None:
        cmd_args.duplicates = config.duplicates


def _diff_cmd(cmd_args):
    """
    Diff command handler.

    Compare two cron job definition files and print the differences in the
    requested format.

    :param cmd_args: Command line arguments for the command
    :returns: integer status code returned from ``main()``
    """
    config_file = cmd_args.config or CRONDIFF_CFG_FILE
    config = CrondiffConfig.from_file(config_file, required=bool(cmd_args.config))
    _merge_config(cmd_args, config)

    options = DiffOptions.from_cmd_args(cmd_args)
    _log_debug_command("Using diff options:\n%s", options)

    results = diff_files(cmd_args.production, cmd_args.development, options=options)
    _log_info(
        "Found %d differences between %s and %s",
        len(results),
        cmd_args.production,
        cmd_args.development,
    )
    print_diffs(results, output_format=cmd_args.format, color=cmd_args.color)
    return 0


def setup_logging(cmd_args):
    """
    Set up crondiff logging.
    """
    # pylint: disable=global-statement
    global _CONSOLE_HANDLER
    level = _DEFAULT_LOG_LEVEL
    if cmd_args.verbose and cmd_args.verbose > 1:
        level = logging.DEBUG
    elif cmd_args.verbose and cmd_args.verbose > 0:
        level = logging.INFO

    crondiff_log = logging.getLogger("crondiff")
    formatter = logging.Formatter("%(levelname)s - %(message)s")
    crondiff_log.setLevel(level)
    if crondiff_log.hasHandlers():
        crondiff_log.handlers.clear()

    # Subsystem log filtering
    _crondiff_subsystem_filter = SubsystemFilter("crondiff")

    # Main console handler
    _CONSOLE_HANDLER = ConsoleHandler()

    _CONSOLE_HANDLER.setLevel(level)
    _CONSOLE_HANDLER.setFormatter(formatter)
    _CONSOLE_HANDLER.addFilter(_crondiff_subsystem_filter)

    crondiff_log.addHandler(_CONSOLE_HANDLER)


def shutdown_logging():
    """
    Shut down crondiff logging.
    """
    logging.shutdown()


def set_debug(debug_arg):
    """
    Set debugging mask from command line argument.
    """
    if not debug_arg:
        return

    mask_map = {
        "jobdiff": CRONDIFF_DEBUG_JOBDIFF,
        "command": CRONDIFF_DEBUG_COMMAND,
        "loader": CRONDIFF_DEBUG_LOADER,
        "render": CRONDIFF_DEBUG_RENDER,
        "all": CRONDIFF_DEBUG_ALL,
    }

    mask = 0
    for name in debug_arg.split(","):
        if name not in mask_map:
            raise ValueError(f"Unknown debug option: {name}")
        mask |= mask_map[name]
    set_debug_mask(mask)


def _add_diff_args(parser):
    """
    Add diff command arguments.
    """
    parser.add_argument(
        "production",
        metavar="PRODUCTION",
        type=str,
        help="Path to the production (first) cron job file",
    )
    parser.add_argument(
        "development",
        metavar="DEVELOPMENT",
        type=str,
        help="Path to the development (second) cron job file",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output differences in JSON format (same as --format=json)",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=DIFF_FORMATS,
        default=None,
        help=f"Output format ({', '.join(DIFF_FORMATS)}; default: table)",
    )
    parser.add_argument(
        "--color",
        choices=COLOR_MODES,
        default=None,
        help="Control color output (default: auto)",
    )
    parser.add_argument(
        "--labels",
        metavar="LABEL_A,LABEL_B",
        type=str,
        default=None,
        help="Names for the two sides (default: production,development)",
    )
    parser.add_argument(
        "--duplicates",
        choices=[policy.value for policy in DuplicatePolicy],
        default=None,
        help="Handling of duplicate job names: use the last definition "
        "or fail (default: last)",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        type=str,
        default=None,
        help=f"Configuration file (default: {CRONDIFF_CFG_FILE} if present)",
    )


def main(args):
    """
    Main entry point for crondiff.
    """
    parser = ArgumentParser(
        description="Compare two cron job definition files",
        prog=basename(args[0]),
    )

    # Global arguments
    parser.add_argument(
        "-d",
        "--debug",
        metavar="DEBUGOPTS",
        type=str,
        help="A list of debug options to enable",
    )
    parser.add_argument("-v", "--verbose", help="Enable verbose output", action="count")
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        help="Report the version number of crondiff",
        version=__version__,
    )
    _add_diff_args(parser)
    parser.set_defaults(func=_diff_cmd)

    cmd_args = parser.parse_args(args[1:])

    status = 1

    try:
        set_debug(cmd_args.debug)
    except ValueError as err:
        print(err)
        parser.print_help()
        return status

    setup_logging(cmd_args)

    _log_debug_command("Parsed %s", " ".join(args[1:]))

    if cmd_args.debug:
        status = cmd_args.func(cmd_args)
    else:
        try:
            status = cmd_args.func(cmd_args)
        # pylint: disable=broad-except
        except KeyboardInterrupt:  # pragma: no cover
            _log_info("Exiting on user cancel")
        except Exception as err:
            _log_error("Command failed: %s", err)

    shutdown_logging()
    return status


# vim: set et ts=4 sw=4 :
