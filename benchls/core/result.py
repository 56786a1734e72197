"""
Generic result container for benchls computations.

Backends wrap their numeric payload in a Result so that timing, solver
diagnostics, and non-fatal warnings travel with the numbers without every
payload type redefining them.

Design decisions:
    - Generic over parameter payload P
    - info dict for solver metadata (method, rank, pivot)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a single solve.

    Attributes:
        params: Payload produced by the backend (coefficients, residuals, ...)
        info: Structured metadata, e.g. {'method': 'qr', 'rank': 2}
        timing: Section timings from Timer.result(), or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=LeastSquaresParams(coefficients=beta, ...),
        ...     info={'method': 'qr', 'rank': 2, 'pivot': [1, 0]},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_qr'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
