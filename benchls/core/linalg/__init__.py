"""
Linear algebra kernels for benchls.

All functions follow these conventions:
    - CPU only, NumPy/SciPy (LAPACK under the hood)
    - Each decomposition returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    qr: Pivoted QR decomposition and least squares solve
    inverse: Gram matrix inversion for standard errors
"""

from benchls.core.linalg.qr import QRResult, qr_cpu, qr_solve_cpu
from benchls.core.linalg.inverse import gram, gram_inverse

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
    "gram",
    "gram_inverse",
]
