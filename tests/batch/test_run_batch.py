"""
Tests for run_batch(): per-marker gating, status reporting and ordering.

The BATCH table has 14 patients with times 1..14. Only the last seven
(times 8..14) have events.

    EVAL:  alternating gain / no gain, 7 vs 7, both at risk at every event
    FLAT:  gain = first seven patients, all censored before the first event,
           so the log-rank variance is zero
    SMALL: 4 gain / 9 no gain, one missing value
    FOUR:  4 gain / 10 no gain
    ODD:   copy numbers 0, 1 and two outliers of 7
"""

import logging

import numpy as np
import pandas as pd
import pytest

from cnasurv import PatientTable, run_batch, survdiff
from cnasurv.batch import (
    ALL_STATUSES,
    REASON_INSUFFICIENT_SAMPLE,
    REASON_MARKER_NOT_FOUND,
    REASON_ZERO_VARIANCE,
    STATUS_EVALUATED,
    STATUS_INVALID,
    STATUS_NOT_COMPUTABLE,
    STATUS_SKIPPED,
    BatchSolution,
)
from cnasurv.core.exceptions import ValidationError


# ── Fixtures ─────────────────────────────────────────────────────────

TIME = np.arange(1, 15, dtype=np.float64)
EVENT = np.array([0] * 7 + [1] * 7)
EVAL = [1, 0] * 7
FLAT = [1] * 7 + [0] * 7
SMALL = [1, 1, 1, 1] + [0] * 9 + [None]
FOUR = [1] * 4 + [0] * 10
ODD = [0, 1] * 6 + [7, 7]


@pytest.fixture
def batch_table():
    return PatientTable.from_arrays(
        patient_id=[f"P{i:02d}" for i in range(14)],
        time=TIME,
        event=EVENT,
        EVAL=EVAL,
        FLAT=FLAT,
        SMALL=SMALL,
        FOUR=FOUR,
        ODD=ODD,
    )


class TestBatchStatuses:

    def test_one_of_each(self, batch_table):
        result = run_batch(batch_table, ["EVAL", "FLAT", "SMALL", "NOPE"])

        assert isinstance(result, BatchSolution)
        assert result["EVAL"].status == STATUS_EVALUATED
        assert result["FLAT"].status == STATUS_NOT_COMPUTABLE
        assert result["SMALL"].status == STATUS_SKIPPED
        assert result["NOPE"].status == STATUS_INVALID

    def test_evaluated_outcome(self, batch_table):
        outcome = run_batch(batch_table, ["EVAL"])["EVAL"]

        assert outcome.is_evaluated
        assert outcome.reason is None
        assert (outcome.n_gain, outcome.n_no_gain, outcome.n_dropped) == (7, 7, 0)
        assert outcome.df == 1
        assert 0.0 <= outcome.p_value <= 1.0

        expected = survdiff(TIME, EVENT, EVAL)
        assert outcome.statistic == pytest.approx(expected.statistic, rel=1e-12)
        assert outcome.p_value == pytest.approx(expected.p_value, rel=1e-12)

    def test_evaluated_carries_curves(self, batch_table):
        outcome = run_batch(batch_table, ["EVAL"])["EVAL"]

        assert outcome.curve_gain.label == "Gain"
        assert outcome.curve_no_gain.label == "No Gain"
        assert outcome.curve_gain.n_observations == 7
        assert outcome.test.group_labels == ("Gain", "No Gain")
        assert outcome.test.statistic == outcome.statistic

    def test_skipped_outcome(self, batch_table):
        outcome = run_batch(batch_table, ["SMALL"])["SMALL"]

        assert outcome.reason == REASON_INSUFFICIENT_SAMPLE
        assert (outcome.n_gain, outcome.n_no_gain, outcome.n_dropped) == (4, 9, 1)
        assert outcome.statistic is None
        assert outcome.p_value is None
        assert outcome.curve_gain is None
        assert outcome.test is None

    def test_not_computable_outcome(self, batch_table):
        outcome = run_batch(batch_table, ["FLAT"])["FLAT"]

        assert outcome.reason == REASON_ZERO_VARIANCE
        assert (outcome.n_gain, outcome.n_no_gain) == (7, 7)
        assert outcome.p_value is None
        assert outcome.statistic is None

    def test_invalid_outcome(self, batch_table):
        outcome = run_batch(batch_table, ["NOPE"])["NOPE"]

        assert outcome.reason == REASON_MARKER_NOT_FOUND
        assert outcome.n_gain is None
        assert outcome.p_value is None

    def test_predicate_failure_is_invalid(self, batch_table):
        def broken(value):
            raise ValueError("cannot classify")

        result = run_batch(batch_table, ["EVAL", "FLAT"], predicate=broken)

        for marker in ("EVAL", "FLAT"):
            assert result[marker].status == STATUS_INVALID
            assert "cannot classify" in result[marker].reason
            assert marker in result[marker].reason

    @pytest.mark.parametrize("workers", [1, 2])
    def test_predicate_error_isolated_to_its_marker(self, batch_table, workers):
        lookup = {0.0: False, 1.0: True}

        result = run_batch(
            batch_table, ["EVAL", "ODD"], predicate=lambda v: lookup[v],
            workers=workers,
        )

        assert list(result) == ["EVAL", "ODD"]
        assert result["EVAL"].status == STATUS_EVALUATED
        assert result["ODD"].status == STATUS_INVALID
        assert "ODD" in result["ODD"].reason
        assert "7.0" in result["ODD"].reason

    def test_statuses_are_known(self, cohort_table):
        result = run_batch(cohort_table, ["GENE_A", "GENE_B", "RARE", "NOPE"])
        assert {result[m].status for m in result} <= ALL_STATUSES


class TestBatchGate:

    def test_four_against_ten_is_skipped(self, batch_table):
        outcome = run_batch(batch_table, ["FOUR"], min_group_size=5)["FOUR"]
        assert outcome.status == STATUS_SKIPPED
        assert (outcome.n_gain, outcome.n_no_gain) == (4, 10)

    def test_default_threshold_is_five(self, cohort_table):
        result = run_batch(cohort_table, ["RARE"])
        assert result.min_group_size == 5
        assert result["RARE"].status == STATUS_SKIPPED
        assert result["RARE"].n_gain == 3

    def test_gate_is_inclusive(self, batch_table):
        assert run_batch(batch_table, ["EVAL"], 7)["EVAL"].status == STATUS_EVALUATED
        assert run_batch(batch_table, ["EVAL"], 8)["EVAL"].status == STATUS_SKIPPED

    def test_lower_threshold_admits_small_cohort(self, batch_table):
        outcome = run_batch(batch_table, ["SMALL"], min_group_size=4)["SMALL"]
        assert outcome.status != STATUS_SKIPPED

    def test_gate_applies_before_variance_check(self, batch_table):
        outcome = run_batch(batch_table, ["FLAT"], min_group_size=10)["FLAT"]
        assert outcome.status == STATUS_SKIPPED


class TestBatchOrdering:

    def test_requested_order_preserved(self, batch_table):
        markers = ["SMALL", "NOPE", "EVAL", "FLAT"]
        result = run_batch(batch_table, markers)

        assert list(result) == markers
        assert list(result.outcomes) == markers
        assert result.to_frame()["marker"].tolist() == markers

    def test_every_marker_reported_once(self, cohort_table):
        markers = ["GENE_B", "RARE", "MISSING", "GENE_A"]
        result = run_batch(cohort_table, markers)

        assert len(result) == len(markers)
        assert sorted(result) == sorted(markers)
        n_by_status = (
            len(result.evaluated()) + len(result.skipped())
            + len(result.not_computable()) + len(result.invalid())
        )
        assert n_by_status == len(markers)

    def test_failures_do_not_affect_other_markers(self, batch_table):
        alone = run_batch(batch_table, ["EVAL"])["EVAL"]
        mixed = run_batch(batch_table, ["NOPE", "FLAT", "EVAL", "SMALL"])["EVAL"]

        assert mixed.statistic == alone.statistic
        assert mixed.p_value == alone.p_value

    def test_repeated_runs_identical(self, cohort_table):
        markers = ["GENE_A", "GENE_B", "RARE"]
        first = run_batch(cohort_table, markers).to_frame()
        second = run_batch(cohort_table, markers).to_frame()
        pd.testing.assert_frame_equal(first, second)

    def test_threads_match_sequential(self, cohort_table):
        markers = ["GENE_A", "GENE_B", "RARE", "NOPE"]
        sequential = run_batch(cohort_table, markers)
        threaded = run_batch(cohort_table, markers, workers=4)

        assert list(threaded) == markers
        pd.testing.assert_frame_equal(sequential.to_frame(), threaded.to_frame())


class TestBatchValidation:

    def test_empty_markers(self, batch_table):
        with pytest.raises(ValidationError, match="at least one marker"):
            run_batch(batch_table, [])

    def test_duplicate_markers(self, batch_table):
        with pytest.raises(ValidationError, match="duplicates"):
            run_batch(batch_table, ["EVAL", "FLAT", "EVAL"])

    def test_string_instead_of_list(self, batch_table):
        with pytest.raises(ValidationError, match="sequence of names"):
            run_batch(batch_table, "EVAL")

    def test_non_string_marker(self, batch_table):
        with pytest.raises(ValidationError, match="strings"):
            run_batch(batch_table, ["EVAL", 3])

    @pytest.mark.parametrize("bad", [0, -1])
    def test_min_group_size_too_small(self, batch_table, bad):
        with pytest.raises(ValidationError, match=">= 1"):
            run_batch(batch_table, ["EVAL"], min_group_size=bad)

    @pytest.mark.parametrize("bad", [5.0, "5", True])
    def test_min_group_size_not_integer(self, batch_table, bad):
        with pytest.raises(ValidationError, match="positive integer"):
            run_batch(batch_table, ["EVAL"], min_group_size=bad)

    def test_workers_zero(self, batch_table):
        with pytest.raises(ValidationError, match="workers"):
            run_batch(batch_table, ["EVAL"], workers=0)

    def test_conf_level(self, batch_table):
        with pytest.raises(ValidationError, match="conf_level"):
            run_batch(batch_table, ["EVAL"], conf_level=1.5)

    def test_not_a_table(self):
        frame = pd.DataFrame({"time": [1, 2], "event": [1, 0], "EVAL": [1, 0]})
        with pytest.raises(ValidationError, match="PatientTable"):
            run_batch(frame, ["EVAL"])

    def test_non_callable_predicate(self, batch_table):
        with pytest.raises(ValidationError, match="callable"):
            run_batch(batch_table, ["EVAL"], predicate="gain")


class TestBatchReporting:

    def test_p_values_only_for_evaluated(self, batch_table):
        result = run_batch(batch_table, ["EVAL", "FLAT", "SMALL", "NOPE"])
        assert list(result.p_values) == ["EVAL"]

    def test_warnings_name_unevaluated_markers(self, batch_table):
        result = run_batch(batch_table, ["EVAL", "FLAT", "SMALL", "NOPE"])

        assert len(result.warnings) == 3
        assert any("SMALL" in w and STATUS_SKIPPED in w for w in result.warnings)
        assert any("FLAT" in w and STATUS_NOT_COMPUTABLE in w for w in result.warnings)
        assert any("NOPE" in w and STATUS_INVALID in w for w in result.warnings)

    def test_no_warnings_when_all_evaluated(self, batch_table):
        assert run_batch(batch_table, ["EVAL"]).warnings == ()

    def test_to_frame(self, batch_table):
        frame = run_batch(batch_table, ["EVAL", "SMALL"]).to_frame()

        assert list(frame.columns) == [
            "marker", "status", "reason", "n_gain", "n_no_gain",
            "n_dropped", "statistic", "p_value",
        ]
        assert frame["status"].tolist() == [STATUS_EVALUATED, STATUS_SKIPPED]
        assert pd.isna(frame.loc[1, "p_value"])

    def test_summary(self, batch_table):
        s = run_batch(batch_table, ["EVAL", "SMALL", "NOPE"]).summary()

        assert "run_batch()" in s
        assert "patients=14" in s
        assert "min_group_size=5" in s
        assert REASON_INSUFFICIENT_SAMPLE in s
        assert REASON_MARKER_NOT_FOUND in s

    def test_repr(self, batch_table):
        r = repr(run_batch(batch_table, ["EVAL", "FLAT", "SMALL", "NOPE"]))
        assert r == (
            "BatchSolution(markers=4, evaluated=1, skipped=1, "
            "not_computable=1, invalid=1)"
        )

    def test_metadata(self, batch_table):
        result = run_batch(batch_table, ["EVAL"])
        assert result.n_patients == 14
        assert result.backend_name == "cpu_batch"
        assert result.timing is not None
        assert "NOPE" not in result
        assert "EVAL" in result

    def test_logs_progress(self, batch_table, caplog):
        with caplog.at_level(logging.INFO, logger="cnasurv.batch"):
            run_batch(batch_table, ["EVAL", "SMALL"])
        assert "1 of 2 marker(s) evaluated" in caplog.text
