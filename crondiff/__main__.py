# Copyright Red Hat
#
# crondiff/__main__.py - Cron job differ module entry point
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
import sys

from crondiff.command import main

sys.exit(main(["crondiff"] + sys.argv[1:]))
