"""
Least squares backends.

Available backends:
    CPUQRBackend: pivoted QR decomposition through LAPACK
"""

from benchls.regression.backends.cpu import CPUQRBackend

__all__ = [
    "CPUQRBackend",
]
