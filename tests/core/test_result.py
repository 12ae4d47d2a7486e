"""
Tests for the Result[P] envelope.

Validates:
    - Arbitrary payload types
    - Frozen immutability
    - Default factories (warnings, provenance)
    - has_warning()
"""

from dataclasses import FrozenInstanceError, dataclass

import pytest

import cnasurv
from cnasurv.core.result import Result, _default_provenance


@dataclass(frozen=True)
class FakeParams:
    """Minimal payload for testing."""
    value: float


def _result(**kwargs):
    base = dict(params=FakeParams(value=1.0), info={}, timing=None, backend_name="cpu")
    base.update(kwargs)
    return Result(**base)


class TestResultConstruction:

    def test_basic_creation(self):
        result = _result(
            params=FakeParams(value=42.0),
            info={"method": "test"},
            timing={"total_seconds": 0.01},
        )
        assert result.params.value == 42.0
        assert result.info["method"] == "test"
        assert result.timing["total_seconds"] == 0.01
        assert result.backend_name == "cpu"

    def test_timing_none(self):
        assert _result().timing is None


class TestDefaults:

    def test_warnings_default_empty(self):
        result = _result()
        assert result.warnings == ()
        assert isinstance(result.warnings, tuple)

    def test_provenance_auto_generated(self):
        result = _result()
        assert result.provenance["cnasurv_version"] == cnasurv.__version__
        assert "numpy_version" in result.provenance
        assert "scipy_version" in result.provenance

    def test_provenance_explicit_override(self):
        result = _result(provenance={"custom": "metadata"})
        assert result.provenance == {"custom": "metadata"}

    def test_default_provenance_independent_copies(self):
        prov1 = _default_provenance()
        prov2 = _default_provenance()
        assert prov1 is not prov2
        assert prov1 == prov2


class TestImmutability:

    def test_cannot_set_params(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.params = FakeParams(value=2.0)

    def test_cannot_set_warnings(self):
        result = _result()
        with pytest.raises(FrozenInstanceError):
            result.warnings = ("new warning",)


class TestHasWarning:

    def test_no_warnings_returns_false(self):
        assert _result().has_warning("anything") is False

    def test_substring_match(self):
        result = _result(warnings=("2 marker(s) skipped: ['A', 'B']",))
        assert result.has_warning("skipped") is True
        assert result.has_warning("invalid") is False
