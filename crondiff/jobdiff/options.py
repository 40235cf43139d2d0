# Copyright Red Hat
#
# crondiff/jobdiff/options.py - Cron job differ diff options
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Cron job diff options.
"""
from dataclasses import dataclass, fields
from typing import Union
from argparse import Namespace
from enum import Enum
import logging

from crondiff import (
    CrondiffArgumentError,
    DEFAULT_LABEL_A,
    DEFAULT_LABEL_B,
    parse_labels,
)

from .difftypes import Side

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error


class DuplicatePolicy(Enum):
    """
    Enum for the handling of duplicate job names within one collection.
    """

    #: Later jobs replace earlier jobs with the same name.
    LAST_WINS = "last"
    #: Duplicate job names are an error.
    ERROR = "error"

    @classmethod
    def from_str(cls, value: str) -> "DuplicatePolicy":
        """
        Return the ``DuplicatePolicy`` named by ``value``.

        :param value: A policy value string ("last" or "error").
        :type value: ``str``
        :returns: The corresponding ``DuplicatePolicy``.
        :rtype: ``DuplicatePolicy``
        :raises: ``CrondiffArgumentError`` for unknown values.
        """
        try:
            return cls(value)
        except ValueError as err:
            choices = ", ".join(policy.value for policy in cls)
            raise CrondiffArgumentError(
                f"Unknown duplicate policy '{value}' (expected one of: {choices})"
            ) from err


@dataclass(frozen=True)
class DiffOptions:
    """
    Cron job comparison options.
    """

    #: Display label for the first (left hand) collection
    label_a: str = DEFAULT_LABEL_A
    #: Display label for the second (right hand) collection
    label_b: str = DEFAULT_LABEL_B
    #: Handling of duplicate job names within a collection
    duplicates: DuplicatePolicy = DuplicatePolicy.LAST_WINS

    def __str__(self):
        """
        Return a human readable string representation of this
        ``DiffOptions`` instance.

        :returns: A human readable string.
        :rtype: ``str``
        """
        items = [
            (key, val.value) if isinstance(val, Enum) else (key, val)
            for key, val in self.__dict__.items()
        ]
        return "\n".join(f"{key}={val}" for key, val in items)

    def label(self, side: Side) -> str:
        """
        Return the display label for ``side``.

        :param side: The side to look up.
        :type side: ``Side``
        :returns: The configured label for ``side``.
        :rtype: ``str``
        """
        return self.label_a if side == Side.A else self.label_b

    @classmethod
    def from_cmd_args(cls, cmd_args: Namespace) -> "DiffOptions":
        """
        Initialise DiffOptions from command line arguments.

        Construct a new ``DiffOptions`` object from the command line
        arguments in ``cmd_args``. A ``labels`` argument of the form
        ``"label_a,label_b"`` sets both side labels.

        :param cmd_args: The command line selection arguments.
        :type cmd_args: ``Namespace``
        :returns: A new ``DiffOptions`` instance
        :rtype: ``DiffOptions``
        """

        def get_value(name: str) -> Union[str, DuplicatePolicy]:
            """
            Get a value from ``cmd_args``, converting policy strings to
            ``DuplicatePolicy`` values.

            :param name: The name of the argument.
            :type name: ``str``
            :returns: The argument converted to an enum if appropriate.
            :rtype: ``Union[str, DuplicatePolicy]``
            """
            attr = getattr(cmd_args, name)
            if name == "duplicates" and isinstance(attr, str):
                return DuplicatePolicy.from_str(attr)
            return attr

        field_names = {f.name for f in fields(cls)}
        kwargs = {
            name: get_value(name)
            for name in field_names
            if getattr(cmd_args, name, None) is not None
        }
        labels = getattr(cmd_args, "labels", None)
        if labels:
            kwargs["label_a"], kwargs["label_b"] = parse_labels(labels)
        options = cls(**kwargs)
        _log_debug("Initialised DiffOptions from arguments: %s", repr(options))
        return options
