# Copyright Red Hat
#
# tests/jobdiff/test_engine.py - Difference engine core tests.
#
# This file is part of the crondiff project.
#
# SPDX-License-Identifier: Apache-2.0
import unittest
import json

from crondiff.jobdiff.engine import (
    DiffEngine,
    DiffType,
    JobDiffRecord,
    JobDiffResults,
    compare,
)
from crondiff.jobdiff.difftypes import Side
from crondiff.jobdiff.options import DiffOptions

from ._util import make_job


def _kinds(records, name=None):
    return [r.diff_type for r in records if name is None or r.job_name == name]


class TestCompare(unittest.TestCase):
    def test_empty_collections(self):
        self.assertEqual(compare([], []), [])

    def test_self_comparison_is_empty(self):
        jobs = [
            make_job("a", command="/bin/a", schedule="0 * * * *"),
            make_job("b", command="/bin/b  --x", schedule="1 * * * *"),
            make_job("c", command="/bin/a", schedule="2 * * * *"),
        ]
        self.assertEqual(compare(jobs, jobs), [])

    def test_missing_both_directions(self):
        backup = make_job("backup", command="/bin/backup.sh", schedule="0 2 * * *")
        a = [backup]
        b = []

        forward = compare(a, b)
        self.assertEqual(len(forward), 1)
        self.assertEqual(forward[0].job_name, "backup")
        self.assertEqual(forward[0].diff_type, DiffType.MISSING_IN_OTHER)
        self.assertEqual(forward[0].side, Side.A)

        backward = compare(b, a)
        self.assertEqual(len(backward), 1)
        self.assertEqual(backward[0].job_name, "backup")
        self.assertEqual(backward[0].diff_type, DiffType.MISSING_IN_OTHER)
        self.assertEqual(backward[0].side, Side.B)

    def test_missing_record_has_no_values(self):
        (record,) = compare([make_job("x")], [])
        self.assertIsNone(record.side_a_value)
        self.assertIsNone(record.side_b_value)

    def test_rename_detection(self):
        a = [make_job("job1", command="/bin/run.sh", schedule="* * * * *")]
        b = [make_job("job1_renamed", command="/bin/run.sh", schedule="* * * * *")]

        records = compare(a, b)
        self.assertEqual(len(records), 2)
        self.assertEqual(
            _kinds(records), [DiffType.RENAMED_IN_OTHER, DiffType.RENAMED_IN_OTHER]
        )

        job1, renamed = records
        self.assertEqual(job1.job_name, "job1")
        self.assertEqual(job1.side, Side.A)
        self.assertEqual(job1.side_b_value, "job1_renamed")
        self.assertIsNone(job1.side_a_value)
        self.assertEqual(job1.other_name, "job1_renamed")

        self.assertEqual(renamed.job_name, "job1_renamed")
        self.assertEqual(renamed.side, Side.B)
        self.assertEqual(renamed.side_a_value, "job1")
        self.assertIsNone(renamed.side_b_value)
        self.assertEqual(renamed.other_name, "job1")

    def test_rename_lookup_uses_exact_command(self):
        # Index keys are normalized but the lookup uses the exact command
        a = [make_job("old", command="a  b")]
        b = [make_job("new", command="a b")]
        records = compare(a, b)
        self.assertEqual(
            [(r.job_name, r.diff_type, r.side) for r in records],
            [
                ("new", DiffType.RENAMED_IN_OTHER, Side.B),
                ("old", DiffType.MISSING_IN_OTHER, Side.A),
            ],
        )
        self.assertEqual(records[0].other_name, "old")

    def test_rename_lookup_exact_command_reversed(self):
        a = [make_job("old", command="a b")]
        b = [make_job("new", command="a  b")]
        self.assertEqual(
            [(r.job_name, r.diff_type) for r in compare(a, b)],
            [
                ("new", DiffType.MISSING_IN_OTHER),
                ("old", DiffType.RENAMED_IN_OTHER),
            ],
        )

    def test_rename_ignores_schedule(self):
        a = [make_job("old", command="/bin/run.sh", schedule="1 * * * *")]
        b = [make_job("new", command="/bin/run.sh", schedule="2 * * * *")]
        self.assertEqual(
            _kinds(compare(a, b)),
            [DiffType.RENAMED_IN_OTHER, DiffType.RENAMED_IN_OTHER],
        )

    def test_command_diff_only(self):
        a = [make_job("j", command="x", schedule="1 * * * *")]
        b = [make_job("j", command="y", schedule="1 * * * *")]
        records = compare(a, b)
        self.assertEqual(_kinds(records), [DiffType.COMMAND_DIFF])
        self.assertEqual(records[0].side_a_value, "x")
        self.assertEqual(records[0].side_b_value, "y")

    def test_command_and_schedule_diff(self):
        a = [make_job("j", command="x", schedule="1 * * * *")]
        b = [make_job("j", command="y", schedule="2 * * * *")]
        records = compare(a, b)
        self.assertEqual(
            _kinds(records, "j"), [DiffType.COMMAND_DIFF, DiffType.SCHEDULE_DIFF]
        )
        self.assertEqual(records[1].side_a_value, "1 * * * *")
        self.assertEqual(records[1].side_b_value, "2 * * * *")

    def test_command_whitespace_is_not_a_difference(self):
        a = [make_job("j", command="a  b", schedule="* * * * *")]
        b = [make_job("j", command="a b", schedule="* * * * *")]
        self.assertEqual(compare(a, b), [])

    def test_schedule_is_not_normalized(self):
        a = [make_job("j", command="x", schedule="0  2 * * *")]
        b = [make_job("j", command="x", schedule="0 2 * * *")]
        records = compare(a, b)
        self.assertEqual(_kinds(records), [DiffType.SCHEDULE_DIFF])

    def test_command_diff_preserves_original_text(self):
        a = [make_job("j", command="  /bin/a   --x")]
        b = [make_job("j", command="/bin/b")]
        (record,) = compare(a, b)
        self.assertEqual(record.side_a_value, "  /bin/a   --x")

    def test_empty_command_and_schedule(self):
        a = [make_job("j", command="", schedule="")]
        b = [make_job("j", command="", schedule="")]
        self.assertEqual(compare(a, b), [])

    def test_duplicate_names_last_wins(self):
        a = [make_job("j", command="/bin/old"), make_job("j", command="/bin/new")]
        b = [make_job("j", command="/bin/new")]
        self.assertEqual(compare(a, b), [])

    def test_duplicate_commands_last_wins(self):
        a = [make_job("x", command="/bin/run"), make_job("y", command="/bin/run")]
        b = [make_job("z", command="/bin/run")]
        records = compare(a, b)
        z = [r for r in records if r.job_name == "z"][0]
        self.assertEqual(z.diff_type, DiffType.RENAMED_IN_OTHER)
        self.assertEqual(z.side_a_value, "y")

    def test_sorted_output(self):
        a = [
            make_job("zeta", command="/bin/z"),
            make_job("alpha", command="/bin/a1", schedule="1 * * * *"),
            make_job("mid", command="/bin/m"),
        ]
        b = [
            make_job("alpha", command="/bin/a2", schedule="2 * * * *"),
            make_job("beta", command="/bin/b"),
        ]
        records = compare(a, b)
        self.assertEqual(
            [(r.job_name, r.diff_type) for r in records],
            [
                ("alpha", DiffType.COMMAND_DIFF),
                ("alpha", DiffType.SCHEDULE_DIFF),
                ("beta", DiffType.MISSING_IN_OTHER),
                ("mid", DiffType.MISSING_IN_OTHER),
                ("zeta", DiffType.MISSING_IN_OTHER),
            ],
        )

    def test_order_independent(self):
        a = [make_job("a", command="/bin/a"), make_job("b", command="/bin/b")]
        b = [make_job("c", command="/bin/c"), make_job("b", command="/bin/x")]
        self.assertEqual(compare(a, b), compare(list(reversed(a)), list(reversed(b))))

    def test_inputs_not_modified(self):
        a = [make_job("a"), make_job("b")]
        b = [make_job("c")]
        a_copy, b_copy = list(a), list(b)
        compare(a, b)
        self.assertEqual(a, a_copy)
        self.assertEqual(b, b_copy)


class TestDiffEngine(unittest.TestCase):
    def test_compute_diff_returns_results(self):
        engine = DiffEngine()
        results = engine.compute_diff([make_job("a")], [])
        self.assertIsInstance(results, JobDiffResults)
        self.assertEqual(len(results), 1)
        self.assertEqual(results.options, DiffOptions())

    def test_compute_diff_uses_options(self):
        options = DiffOptions(label_a="live", label_b="staging")
        results = DiffEngine().compute_diff([], [make_job("a")], options)
        self.assertIs(results.options, options)


class TestJobDiffRecord(unittest.TestCase):
    def test_kind_alias(self):
        record = JobDiffRecord("a", DiffType.SCHEDULE_DIFF, "1", "2")
        self.assertEqual(record.kind, DiffType.SCHEDULE_DIFF)

    def test_equality(self):
        r1 = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y")
        r2 = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y")
        r3 = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "z")
        self.assertEqual(r1, r2)
        self.assertEqual(hash(r1), hash(r2))
        self.assertNotEqual(r1, r3)
        self.assertNotEqual(r1, "a")

    def test_to_dict_omits_absent_values(self):
        record = JobDiffRecord("a", DiffType.MISSING_IN_OTHER, side=Side.B)
        self.assertEqual(
            record.to_dict(),
            {"job_name": "a", "kind": "missing_in_other", "side": "b"},
        )

    def test_to_dict_with_labels(self):
        record = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y")
        out = record.to_dict(DiffOptions())
        self.assertEqual(
            out,
            {
                "job_name": "a",
                "kind": "command_diff",
                "side": "production",
                "side_a_value": "x",
                "side_b_value": "y",
            },
        )

    def test_to_dict_keeps_empty_strings(self):
        record = JobDiffRecord("a", DiffType.SCHEDULE_DIFF, "", "0 * * * *")
        out = record.to_dict()
        self.assertEqual(out["side_a_value"], "")

    def test_other_name_only_for_renames(self):
        record = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y")
        self.assertIsNone(record.other_name)

    def test__str__(self):
        s = str(JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y"))
        self.assertIn("Name: a", s)
        self.assertIn("diff_type: command_diff", s)
        self.assertIn("side_a_value: x", s)
        self.assertIn("side_b_value: y", s)


class TestJobDiffResults(unittest.TestCase):
    def setUp(self):
        self.rec_cmd = JobDiffRecord("a", DiffType.COMMAND_DIFF, "x", "y")
        self.rec_sched = JobDiffRecord("a", DiffType.SCHEDULE_DIFF, "1", "2")
        self.rec_ren = JobDiffRecord(
            "b", DiffType.RENAMED_IN_OTHER, side_b_value="c", side=Side.A
        )
        self.rec_miss = JobDiffRecord("d", DiffType.MISSING_IN_OTHER, side=Side.B)
        self.results = JobDiffResults(
            [self.rec_cmd, self.rec_sched, self.rec_ren, self.rec_miss],
            DiffOptions(),
            "prod.yaml",
            "dev.yaml",
        )

    def test_list_interface(self):
        self.assertEqual(len(self.results), 4)
        self.assertEqual(self.results[0], self.rec_cmd)
        self.assertEqual(
            list(self.results),
            [self.rec_cmd, self.rec_sched, self.rec_ren, self.rec_miss],
        )

    def test_summary_properties(self):
        self.assertEqual(self.results.command_diffs, [self.rec_cmd])
        self.assertEqual(self.results.schedule_diffs, [self.rec_sched])
        self.assertEqual(self.results.renamed, [self.rec_ren])
        self.assertEqual(self.results.missing, [self.rec_miss])

    def test_names(self):
        self.assertEqual(self.results.names(), ["a", "b", "d"])

    def test_json(self):
        data = json.loads(self.results.json())
        self.assertEqual(len(data), 4)
        self.assertEqual(data[0]["kind"], "command_diff")
        self.assertEqual(data[2]["side_b_value"], "c")
        self.assertNotIn("side_a_value", data[2])
        self.assertEqual(data[3]["side"], "development")
        for entry in data:
            self.assertNotIn(None, entry.values())

    def test_json_pretty(self):
        self.assertIn("\n", self.results.json(pretty=True))
        self.assertNotIn("\n", self.results.json())

    def test__repr__(self):
        self.assertTrue(repr(self.results).startswith("JobDiffResults([...]"))
