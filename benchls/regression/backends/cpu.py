"""
CPU backend for least squares.

Uses column-pivoted QR via LAPACK (through SciPy) so that a rank-deficient
design is detected and reported instead of producing an arbitrary
coefficient vector.
"""

from typing import Any

from benchls.core.exceptions import SingularMatrixError
from benchls.core.result import Result
from benchls.core.timing import Timer
from benchls.core.linalg.qr import qr_cpu, qr_solve_cpu
from benchls.regression.design import Design
from benchls.regression.solution import LeastSquaresParams


class CPUQRBackend:
    """
    CPU backend using pivoted QR decomposition.

    Stateless: one instance can solve any number of designs.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: Design) -> Result[LeastSquaresParams]:
        """
        Solve min_β ||y - Xβ||² via QR decomposition.

        Algorithm:
            1. Compute pivoted QR decomposition: XP = QR
            2. Reject if numerical rank < p
            3. Solve: β = P R⁻¹ Q'y
            4. Compute residuals, fitted values, and RSS

        Raises:
            SingularMatrixError: If X is rank-deficient or has fewer rows
                than columns
            NumericalError: If X contains NaN or Inf
            ConvergenceError: If LAPACK fails
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n, p = design.n, design.p

        if n < p:
            raise SingularMatrixError(
                f"Design matrix has {n} rows but {p} columns; the least squares "
                f"solution is not unique.",
                matrix_name='X',
                rank=n,
                expected_rank=p,
            )

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X)

        with timer.section('solve'):
            coefficients = qr_solve_cpu(X, y, qr_result=qr_result)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values
            rss = float(residuals @ residuals)

        timer.stop()

        params = LeastSquaresParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            rank=qr_result.rank,
            df_residual=n - qr_result.rank,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
            'pivot': qr_result.pivot.tolist(),
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
