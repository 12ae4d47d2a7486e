"""
Shared compute infrastructure for cnasurv.

Submodules:
    timing: Execution timing utilities
"""

from cnasurv.core.compute.timing import Timer

__all__ = [
    "Timer",
]
