"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np

from cnasurv import PatientTable


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def small_table():
    """Twelve patients, three markers.

    ERBB2: 6 gain / 6 no gain, no missing values
    MYC:   3 gain, one missing copy number
    CCND1: values as strings, one unparsable
    """
    return PatientTable.from_arrays(
        patient_id=[f"TCGA-{i:02d}" for i in range(12)],
        time=[5, 10, 15, 20, 25, 30, 8, 16, 24, 32, 40, 48],
        event=[1, 1, 0, 1, 1, 0, 1, 0, 1, 0, 1, 0],
        ERBB2=[1, 2, 1, 1, 2, 1, 0, 0, -1, 0, 0, -2],
        MYC=[1, 1, 1, 0, 0, 0, 0, 0, 0, None, 0, 0],
        CCND1=["1", "0", "2", "0", "n/a", "1", "0", "1", "0", "0", "1", "0"],
    )


@pytest.fixture
def cohort_table(rng):
    """Synthetic subtype cohort: 80 patients, gain shortens survival for GENE_A."""
    n = 80
    gain_a = rng.integers(0, 2, n)
    gain_b = rng.integers(-1, 2, n)
    scale = np.where(gain_a > 0, 300.0, 900.0)
    time = np.round(rng.exponential(scale), 1)
    event = rng.binomial(1, 0.7, n)
    return PatientTable.from_arrays(
        patient_id=[f"P{i:03d}" for i in range(n)],
        time=time,
        event=event,
        GENE_A=gain_a,
        GENE_B=gain_b,
        RARE=np.where(np.arange(n) < 3, 1, 0),
    )
