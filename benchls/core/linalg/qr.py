"""
QR decomposition and least squares.

Column-pivoted QR (LAPACK geqp3 through SciPy) is used both to detect
numerical rank and to solve the least squares problem, so a rank-deficient
design is reported instead of producing an arbitrary coefficient vector.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray
from scipy import linalg as sla

from benchls.core.exceptions import ConvergenceError, NumericalError, SingularMatrixError
from benchls.core.validation import is_finite


@dataclass(frozen=True)
class QRResult:
    """
    Result of a column-pivoted QR decomposition of the column-scaled
    design, (X / scale)[:, pivot] = QR.

    Attributes:
        Q: Orthonormal columns (n x k, k = min(n, p))
        R: Upper triangular matrix (k x p)
        pivot: Column permutation applied to X
        rank: Numerical rank determined from the R diagonal
        scale: 2-norm of each column of X (1 for all-zero columns)
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    pivot: NDArray[np.intp]
    rank: int
    scale: NDArray[np.floating[Any]]


def qr_cpu(X: NDArray[np.floating[Any]]) -> QRResult:
    """
    Economy QR decomposition with column pivoting.

    Columns are first divided by their 2-norm (an all-zero column stays zero
    and lowers the rank), then factorized. Rank uses the same tolerance as
    numpy.linalg.matrix_rank applied to the pivoted R diagonal of the scaled
    matrix: max(n, p) * eps * |R[0, 0]|.

    Raises:
        NumericalError: If X contains NaN or Inf
        ConvergenceError: If LAPACK reports a failure
    """
    if not is_finite(X):
        raise NumericalError("Design matrix contains non-finite values")

    norms = np.linalg.norm(X, axis=0)
    scale = np.where(norms > 0, norms, 1.0)
    X_scaled = X / scale

    try:
        Q, R, pivot = sla.qr(X_scaled, mode='economic', pivoting=True, check_finite=False)
    except np.linalg.LinAlgError as e:
        raise ConvergenceError(f"QR decomposition failed: {e}", reason=str(e)) from e

    diag_R = np.abs(np.diag(R))
    if len(diag_R) > 0 and diag_R[0] > 0:
        tol = max(X.shape) * np.finfo(X.dtype).eps * diag_R[0]
        rank = int(np.sum(diag_R > tol))
    else:
        rank = 0

    return QRResult(Q=Q, R=R, pivot=pivot, rank=rank, scale=scale)


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    qr_result: QRResult | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Solve min_β ||y - Xβ||² via pivoted QR.

    The solution is computed as:
        (X / s) P = QR
        z = R⁻¹ Q'y
        β[P] = z / s[P]

    Args:
        X: Design matrix (n x p)
        y: Response vector (n,)
        qr_result: Decomposition of X, if already computed

    Returns:
        Coefficient vector β (p,) in the original column order

    Raises:
        SingularMatrixError: If X has rank below p (includes n < p)
    """
    n, p = X.shape
    if qr_result is None:
        qr_result = qr_cpu(X)

    if qr_result.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient: rank={qr_result.rank}, expected={p}. "
            f"This indicates perfect multicollinearity or too few observations.",
            matrix_name='X',
            rank=qr_result.rank,
            expected_rank=p
        )

    Qty = qr_result.Q.T @ y
    z = sla.solve_triangular(qr_result.R[:p, :p], Qty[:p], lower=False, check_finite=False)

    beta = np.empty(p, dtype=np.float64)
    beta[qr_result.pivot] = z / qr_result.scale[qr_result.pivot]
    return beta
