"""
Generic result container for all cnasurv computations.

The Result class provides a standardized envelope that all domain-specific
results use. This enables shared tooling for timing, reproducibility and
reporting while allowing each domain to define its own parameter structure.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (method, counts, diagnostics)
    - timing is optional (don't burden unit tests)
    - provenance records library versions for reproducibility
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


def _default_provenance() -> dict[str, str]:
    """Library versions that produced a result."""
    import numpy
    import scipy

    from cnasurv import __version__

    return {
        'cnasurv_version': __version__,
        'numpy_version': numpy.__version__,
        'scipy_version': scipy.__version__,
    }


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for statistical computations.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Domain-specific parameters (curve, test statistic, outcomes)
        info: Structured metadata (method, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the code path that produced this result
        warnings: Non-fatal issues encountered during computation
        provenance: Library versions used for the computation

    Examples:
        >>> Result(
        ...     params=KMParams(...),
        ...     info={'method': 'Kaplan-Meier'},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_km',
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)
    provenance: dict[str, str] = field(default_factory=_default_provenance)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
