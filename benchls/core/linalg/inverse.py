"""
Gram matrix inversion.

Only used for coefficient standard errors, after the design has already
passed the rank check of the QR solve.
"""

from typing import Any
import numpy as np
from numpy.typing import NDArray

from benchls.core.exceptions import SingularMatrixError
from benchls.core.validation import is_finite


def gram(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """X'X."""
    return X.T @ X


def gram_inverse(X: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
    """
    Compute (X'X)⁻¹.

    Inverted on unit-norm columns and rescaled, (X'X)⁻¹ = S⁻¹ (Xs'Xs)⁻¹ S⁻¹
    with Xs = X S⁻¹, S = diag(column norms).

    Raises:
        SingularMatrixError: If X'X is singular, or its inverse is
            non-finite or has a negative diagonal
    """
    norms = np.linalg.norm(X, axis=0)
    scale = np.where(norms > 0, norms, 1.0)
    XtX = gram(X / scale)
    p = XtX.shape[0]
    try:
        XtX_inv = np.linalg.inv(XtX)
    except np.linalg.LinAlgError as e:
        raise SingularMatrixError(
            f"X'X is singular and cannot be inverted: {e}",
            matrix_name="X'X",
            expected_rank=p,
        ) from e

    if not is_finite(XtX_inv) or np.any(np.diag(XtX_inv) < 0):
        raise SingularMatrixError(
            "X'X is numerically singular: inverse has non-finite or negative diagonal entries",
            matrix_name="X'X",
            expected_rank=p,
        )
    return XtX_inv / np.outer(scale, scale)
