"""ndinterp: N-dimensional interpolation on axis-aligned grids.

Provides :class:`KnotAxis` for per-dimension knot sequences,
:class:`Grid` for dense multi-channel sample tables, and
:class:`Interpolator`, which evaluates a grid anywhere by composing a
one-dimensional :class:`Kernel` per axis (nearest, linear, log-linear,
cubic, log-cubic) under a per-axis :class:`BoundaryPolicy`.

Example
-------
>>> from ndinterp import Grid, Interpolator
>>> grid = Grid([[0.0, 1.0, 2.0], [0.0, 1.0]], [0, 10, 1, 11, 2, 12])
>>> interp = Interpolator(grid, "linear", "extrapolate")
>>> interp.evaluate([3.0, 0.0]).value
3.0
"""

from ndinterp._version import __version__
from ndinterp.axis import BracketResult, KnotAxis
from ndinterp.boundary import BoundaryPolicy
from ndinterp.errors import (
    InsufficientKnotsError,
    InterpolationError,
    NonPositiveValueError,
    OutOfDomainError,
    ShapeMismatchError,
    Status,
)
from ndinterp.grid import Grid
from ndinterp.interpolator import EvaluationResult, Interpolator
from ndinterp.kernels import Kernel

__all__ = [
    "BoundaryPolicy",
    "BracketResult",
    "EvaluationResult",
    "Grid",
    "InsufficientKnotsError",
    "InterpolationError",
    "Interpolator",
    "Kernel",
    "KnotAxis",
    "NonPositiveValueError",
    "OutOfDomainError",
    "ShapeMismatchError",
    "Status",
    "__version__",
]
