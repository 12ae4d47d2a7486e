"""
Exception hierarchy for cnasurv.

All exceptions inherit from CnaSurvError to allow catching any
library-specific error.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Expected data conditions (missing values, small cohorts) are
      reported as outcomes, never raised
"""


class CnaSurvError(Exception):
    """Base exception for all cnasurv errors."""
    pass


class ValidationError(CnaSurvError):
    """
    Input validation failed.

    Raised when caller-provided inputs fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array lengths are inconsistent.

    Raised when columns or arrays that describe the same patients
    have different lengths.
    """
    pass


class InvalidMarkerError(ValidationError):
    """
    Requested marker is not a column of the patient table.

    Attributes:
        marker: The marker name that was requested
        available: Marker names the table does provide
    """

    def __init__(
        self,
        message: str,
        marker: str | None = None,
        available: tuple[str, ...] = (),
    ):
        super().__init__(message)
        self.marker = marker
        self.available = available


class NumericalError(CnaSurvError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class NotComputableError(NumericalError):
    """
    Log-rank statistic is undefined because its variance is zero.

    Happens when no pooled event time has more than one subject at risk
    with both groups represented, e.g. when neither group has events.

    Attributes:
        observed: Observed events per group
        expected: Expected events per group under the null
        variance: The (zero) variance of O - E for the first group
    """

    def __init__(
        self,
        message: str,
        observed: tuple[float, ...] | None = None,
        expected: tuple[float, ...] | None = None,
        variance: float | None = None,
    ):
        super().__init__(message)
        self.observed = observed
        self.expected = expected
        self.variance = variance
