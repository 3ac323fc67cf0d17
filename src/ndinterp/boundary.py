"""Out-of-range handling for query coordinates."""

from __future__ import annotations

import math
from enum import Enum
from typing import Tuple

from ndinterp.axis import BracketResult, KnotAxis
from ndinterp.errors import OutOfDomainError


class BoundaryPolicy(Enum):
    """What to do with a coordinate outside an axis' knot range.

    ``CLAMP``
        Treat the coordinate as the nearest edge knot.
    ``EXTRAPOLATE``
        Let the kernel continue past the edge knot.
    ``REJECT``
        Raise :class:`~ndinterp.errors.OutOfDomainError`.
    """

    CLAMP = "clamp"
    EXTRAPOLATE = "extrapolate"
    REJECT = "reject"

    @classmethod
    def coerce(cls, policy) -> "BoundaryPolicy":
        """Return ``policy`` as a :class:`BoundaryPolicy`, accepting its string value."""
        if isinstance(policy, cls):
            return policy
        if isinstance(policy, str):
            try:
                return cls(policy.lower())
            except ValueError:
                names = [p.value for p in cls]
                raise ValueError(
                    f"Unknown boundary policy {policy!r}; expected one of {names}"
                ) from None
        raise TypeError(
            f"policy must be a BoundaryPolicy or str, got {type(policy).__name__}"
        )


DEFAULT_POLICY = BoundaryPolicy.CLAMP


def bracket_with_policy(
    axis: KnotAxis, coord: float, policy: BoundaryPolicy, dim: int = 0
) -> Tuple[BracketResult, bool]:
    """Bracket ``coord`` on ``axis`` and apply ``policy`` to the result.

    Parameters
    ----------
    axis : KnotAxis
        Axis to bracket on.
    coord : float
        Query coordinate.
    policy : BoundaryPolicy
        Out-of-range handling for this axis.
    dim : int, optional
        Axis position, used in error messages only.

    Returns
    -------
    bracket : BracketResult
        Bracket to hand to the kernel.
    clamped : bool
        True if ``CLAMP`` moved the coordinate onto an edge knot.

    Raises
    ------
    OutOfDomainError
        If ``coord`` is NaN or infinite, or lies outside the axis under
        ``REJECT``.
    """
    if not math.isfinite(coord):
        raise OutOfDomainError(f"Coordinate for dimension {dim} is not finite: {coord}")

    bracket = axis.bracket(coord)
    if not bracket.extrapolating:
        return bracket, False

    if policy is BoundaryPolicy.EXTRAPOLATE:
        return bracket, False
    if policy is BoundaryPolicy.CLAMP:
        t = 0.0 if bracket.t < 0.0 else 1.0
        return BracketResult(bracket.lower_index, t, False), True
    raise OutOfDomainError(
        f"Coordinate {coord} for dimension {dim} is outside "
        f"[{axis.lower}, {axis.upper}]"
    )
