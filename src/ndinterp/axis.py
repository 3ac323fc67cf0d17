"""Knot axes and per-coordinate bracketing.

A :class:`KnotAxis` is one dimension of a grid: an immutable, strictly
increasing sequence of knot positions.  Its :meth:`~KnotAxis.bracket`
method locates the interval containing a coordinate and the normalised
position ``t`` inside it, which is all the interpolation kernels need.
"""

from __future__ import annotations

from typing import NamedTuple, Sequence

import numpy as np

from ndinterp._jit import locate_interval


class BracketResult(NamedTuple):
    """Interval lookup for one coordinate on one axis.

    Attributes
    ----------
    lower_index : int
        Index ``i`` of the interval ``[knots[i], knots[i + 1]]``.
    t : float
        ``(coord - knots[i]) / (knots[i + 1] - knots[i])``.  Lies in
        ``[0, 1]`` unless ``extrapolating`` is set.
    extrapolating : bool
        True when the coordinate is outside the knot range.
    """

    lower_index: int
    t: float
    extrapolating: bool


class KnotAxis:
    """Ordered, strictly increasing knot positions for one grid dimension.

    Parameters
    ----------
    knots : sequence of float
        Knot positions.  Must be finite and strictly increasing.  A single
        knot gives a degenerate axis that contributes no interpolation.

    Raises
    ------
    ValueError
        If ``knots`` is empty, not 1-D, non-finite or not strictly
        increasing.

    Examples
    --------
    >>> axis = KnotAxis([0.0, 1.0, 3.0])
    >>> axis.bracket(2.0)
    BracketResult(lower_index=1, t=0.5, extrapolating=False)
    """

    def __init__(self, knots: Sequence[float]):
        knots = np.array(knots, dtype=float)
        if knots.ndim != 1:
            raise ValueError(f"knots must be 1-D, got shape {knots.shape}")
        if knots.size == 0:
            raise ValueError("knots must contain at least one value")
        if not np.isfinite(knots).all():
            raise ValueError("knots contain NaN or Inf")
        steps = np.diff(knots)
        if np.any(steps <= 0):
            bad = int(np.argmax(steps <= 0))
            raise ValueError(
                f"knots must be strictly increasing; knots[{bad}]={knots[bad]} "
                f">= knots[{bad + 1}]={knots[bad + 1]}"
            )
        knots.flags.writeable = False
        self._knots = knots

    @property
    def knots(self) -> np.ndarray:
        """Read-only knot array."""
        return self._knots

    @property
    def lower(self) -> float:
        return float(self._knots[0])

    @property
    def upper(self) -> float:
        return float(self._knots[-1])

    def __len__(self) -> int:
        return len(self._knots)

    def __getitem__(self, i):
        return self._knots[i]

    def spacing(self, i: int) -> float:
        """Width ``knots[i + 1] - knots[i]`` of interval ``i``."""
        return float(self._knots[i + 1] - self._knots[i])

    def contains(self, coord: float) -> bool:
        """True if ``coord`` lies inside ``[lower, upper]``."""
        return self.lower <= coord <= self.upper

    def bracket(self, coord: float) -> BracketResult:
        """Find the interval containing ``coord``.

        A coordinate equal to a knot belongs to the interval that starts at
        that knot, except for the last knot, which closes the last interval
        (``t == 1``).  Coordinates outside the knot range are attached to
        the nearest edge interval with ``t`` outside ``[0, 1]``.

        Parameters
        ----------
        coord : float
            Query coordinate.

        Returns
        -------
        BracketResult
        """
        knots = self._knots
        n = len(knots)
        if n == 1:
            return BracketResult(0, 0.0, False)

        coord = float(coord)
        if coord < knots[0]:
            i, extrapolating = 0, True
        elif coord > knots[-1]:
            i, extrapolating = n - 2, True
        else:
            i, extrapolating = min(int(locate_interval(knots, coord)), n - 2), False

        lo = knots[i]
        t = (coord - lo) / (knots[i + 1] - lo)
        return BracketResult(i, float(t), extrapolating)

    # ------------------------------------------------------------------
    # Comparison and printing
    # ------------------------------------------------------------------

    def __eq__(self, other) -> bool:
        if not isinstance(other, KnotAxis):
            return NotImplemented
        return self._knots.shape == other._knots.shape and bool(
            np.array_equal(self._knots, other._knots)
        )

    def __hash__(self) -> int:
        return hash(self._knots.tobytes())

    def __repr__(self) -> str:
        if len(self) > 6:
            shown = ", ".join(f"{k:g}" for k in self._knots[:3])
            shown += ", ..., " + ", ".join(f"{k:g}" for k in self._knots[-2:])
        else:
            shown = ", ".join(f"{k:g}" for k in self._knots)
        return f"KnotAxis([{shown}], n={len(self)})"

    def __setstate__(self, state: dict) -> None:
        self.__dict__.update(state)
        self._knots.flags.writeable = False
