"""
CRLS backends.

Available backends:
    CPUCRLSBackend: NumPy/SciPy implementation of the CRLS iteration
"""

from krylovls.crls.backends.cpu import CPUCRLSBackend

__all__ = [
    "CPUCRLSBackend",
]
