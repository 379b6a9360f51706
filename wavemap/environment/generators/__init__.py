"""Terrain generation for Wavemap.

- WFCSolver: entropy-driven Wave Function Collapse with restart on contradiction
- propagate: arc-consistency pass used after every collapse
- solve: one-call entry point returning a fully collapsed Grid
"""

from .errors import WFCContradiction, WFCConvergenceError
from .propagation import propagate
from .wfc_solver import WFCSolver, solve

__all__ = [
    "WFCContradiction",
    "WFCConvergenceError",
    "WFCSolver",
    "propagate",
    "solve",
]
