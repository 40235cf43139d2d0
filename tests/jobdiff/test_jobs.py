# Copyright Red Hat
#
# tests/jobdiff/test_jobs.py - Cron job record and index tests.
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest

from crondiff.jobdiff.jobs import (
    CronJob,
    build_command_index,
    build_name_index,
    find_duplicate_names,
    normalize_command,
)

from ._util import make_job


class TestNormalizeCommand(unittest.TestCase):
    def test_collapses_whitespace_runs(self):
        self.assertEqual(normalize_command("a   b\tc"), "a b c")
        self.assertEqual(normalize_command("a b c"), "a b c")

    def test_strips_leading_and_trailing(self):
        self.assertEqual(normalize_command("  /bin/run.sh  --now \n"), "/bin/run.sh --now")

    def test_newlines_and_mixed_whitespace(self):
        self.assertEqual(normalize_command("echo\n\t  hello\r\nworld"), "echo hello world")

    def test_empty_and_blank(self):
        self.assertEqual(normalize_command(""), "")
        self.assertEqual(normalize_command(" \t\n "), "")

    def test_idempotent(self):
        for cmd in ("", "x", "  a  b  ", "a\tb\nc", "/bin/sh -c 'echo  hi'"):
            with self.subTest(cmd=cmd):
                once = normalize_command(cmd)
                self.assertEqual(normalize_command(once), once)

    def test_does_not_interpret_quotes(self):
        # Whitespace inside quotes is collapsed too: normalization is purely
        # lexical.
        self.assertEqual(normalize_command("echo 'a   b'"), "echo 'a b'")


class TestCronJob(unittest.TestCase):
    def test_defaults(self):
        job = CronJob("name")
        self.assertEqual(job.command, "")
        self.assertEqual(job.schedule, "")

    def test_frozen(self):
        job = make_job("a")
        with self.assertRaises(AttributeError):
            job.name = "b"

    def test_to_dict(self):
        job = make_job("a", command="/bin/a", schedule="0 1 * * *")
        self.assertEqual(
            job.to_dict(),
            {"name": "a", "command": "/bin/a", "schedule": "0 1 * * *"},
        )

    def test__str__(self):
        s = str(make_job("a", command="/bin/a", schedule="0 1 * * *"))
        self.assertIn("Name: a", s)
        self.assertIn("command: /bin/a", s)
        self.assertIn("schedule: 0 1 * * *", s)


class TestIndexes(unittest.TestCase):
    def test_build_name_index(self):
        jobs = [make_job("a"), make_job("b")]
        index = build_name_index(jobs)
        self.assertEqual(set(index), {"a", "b"})
        self.assertIs(index["a"], jobs[0])

    def test_build_name_index_last_wins(self):
        first = make_job("a", command="/bin/first")
        last = make_job("a", command="/bin/last")
        index = build_name_index([first, last])
        self.assertEqual(len(index), 1)
        self.assertIs(index["a"], last)

    def test_build_name_index_empty(self):
        self.assertEqual(build_name_index([]), {})

    def test_build_command_index_normalizes_keys(self):
        index = build_command_index([make_job("a", command="/bin/run.sh   --x")])
        self.assertEqual(index, {"/bin/run.sh --x": "a"})

    def test_build_command_index_last_wins(self):
        jobs = [make_job("a", command="/bin/x"), make_job("b", command="/bin/x")]
        self.assertEqual(build_command_index(jobs), {"/bin/x": "b"})

    def test_indexes_do_not_modify_jobs(self):
        job = make_job("a", command="  /bin/x   y ")
        build_command_index([job])
        self.assertEqual(job.command, "  /bin/x   y ")

    def test_find_duplicate_names(self):
        jobs = [make_job("b"), make_job("a"), make_job("b"), make_job("a"), make_job("c")]
        self.assertEqual(find_duplicate_names(jobs), ["a", "b"])

    def test_find_duplicate_names_none(self):
        self.assertEqual(find_duplicate_names([make_job("a"), make_job("b")]), [])
