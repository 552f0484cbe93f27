"""
Matrix Game Nash Solver

Approximates Nash equilibria of two-player zero-sum matrix games with
fictitious play, CFR and CFR+, on NumPy or (optionally) CuPy arrays.
"""

__version__ = "0.1.0"
