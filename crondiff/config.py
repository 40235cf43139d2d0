# Copyright Red Hat
#
# crondiff/config.py - Cron job differ configuration file
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
"""
Crondiff configuration file support.

The configuration file uses INI syntax::

    [Global]
    Labels = production,development
    Color = auto
    Format = table
    Duplicates = last

Values given on the command line override the configuration file.
"""
from configparser import ConfigParser, Error as ConfigParserError
from dataclasses import dataclass
from os.path import exists, join
from typing import Optional, Tuple
import logging

from crondiff import (
    CRONDIFF_SUBSYSTEM_COMMAND,
    CrondiffArgumentError,
    CrondiffConfigError,
    DEFAULT_LABEL_A,
    DEFAULT_LABEL_B,
    parse_labels,
)
from crondiff.jobdiff.options import DuplicatePolicy
from crondiff.jobdiff.render import RendererFactory
from crondiff.termcontrol import COLOR_MODES

_log = logging.getLogger(__name__)

_log_debug = _log.debug
_log_info = _log.info
_log_warn = _log.warning
_log_error = _log.error

#: Crondiff configuration directory
_CRONDIFF_CFG_DIR = "/etc/crondiff"

#: Default configuration file path
CRONDIFF_CFG_FILE = join(_CRONDIFF_CFG_DIR, "crondiff.conf")

#: Global configuration section
_CRONDIFF_CFG_GLOBAL = "Global"

#: Labels configuration key
_CRONDIFF_CFG_LABELS = "Labels"
#: Color configuration key
_CRONDIFF_CFG_COLOR = "Color"
#: Format configuration key
_CRONDIFF_CFG_FORMAT = "Format"
#: Duplicates configuration key
_CRONDIFF_CFG_DUPLICATES = "Duplicates"

#: Valid output format names
CONFIG_FORMATS = tuple(RendererFactory.DIFF_FORMATS)
#: Valid duplicate policy names
CONFIG_DUPLICATES = tuple(policy.value for policy in DuplicatePolicy)


@dataclass
class CrondiffConfig:
    """
    Crondiff configuration.
    """

    labels: Tuple[str, str] = (DEFAULT_LABEL_A, DEFAULT_LABEL_B)
    color: str = "auto"
    format: str = "table"
    duplicates: str = "last"

    @classmethod
    def from_file(
        cls, config_file: str = CRONDIFF_CFG_FILE, required: bool = False
    ) -> "CrondiffConfig":
        """
        Load ``CrondiffConfig`` from an INI-style configuration file located
        at ``config_file``.

        :param config_file: path to crondiff.conf
        :type config_file: ``str``.
        :param required: Raise an error if ``config_file`` does not exist.
        :type required: ``bool``
        :returns: A ``CrondiffConfig`` instance initialised from
                  ``config_file``.
        :rtype: ``CrondiffConfig``
        :raises: ``CrondiffConfigError`` if the file is invalid, or missing
                 when ``required`` is ``True``.
        """
        if not exists(config_file):
            if required:
                raise CrondiffConfigError(
                    f"Configuration file not found: {config_file}"
                )
            return cls()

        _log_debug(
            "Loading configuration from '%s'",
            config_file,
            extra={"subsystem": CRONDIFF_SUBSYSTEM_COMMAND},
        )
        cfg = ConfigParser()
        try:
            cfg.read([config_file], encoding="utf8")
        except (ConfigParserError, UnicodeDecodeError) as err:
            raise CrondiffConfigError(
                f"Error reading configuration file {config_file}: {err}"
            ) from err

        config = cls()
        if not cfg.has_section(_CRONDIFF_CFG_GLOBAL):
            return config

        section = cfg[_CRONDIFF_CFG_GLOBAL]

        def _get(key: str, choices: Optional[Tuple[str, ...]] = None):
            value = section.get(key)
            if value is None:
                return None
            value = value.strip()
            if choices and value not in choices:
                raise CrondiffConfigError(
                    f"Invalid {key} value in {config_file}: '{value}' "
                    f"(expected one of: {', '.join(choices)})"
                )
            return value

        labels = _get(_CRONDIFF_CFG_LABELS)
        if labels is not None:
            try:
                config.labels = parse_labels(labels)
            except CrondiffArgumentError as err:
                raise CrondiffConfigError(f"{config_file}: {err}") from err

        config.color = _get(_CRONDIFF_CFG_COLOR, tuple(COLOR_MODES)) or config.color
        config.format = _get(_CRONDIFF_CFG_FORMAT, CONFIG_FORMATS) or config.format
        config.duplicates = (
            _get(_CRONDIFF_CFG_DUPLICATES, CONFIG_DUPLICATES) or config.duplicates
        )
        return config
