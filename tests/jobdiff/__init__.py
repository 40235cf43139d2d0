# Copyright Red Hat
#
# tests/jobdiff/__init__.py - Cron job differ jobdiff test package
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
