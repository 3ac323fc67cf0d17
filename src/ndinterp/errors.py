"""Error taxonomy for grid construction and evaluation.

Every error raised for a recognised failure mode derives from
:class:`InterpolationError` (itself a :class:`ValueError`) and carries the
:class:`Status` code that the flat, status-returning surface in
:mod:`ndinterp.capi` reports for it.
"""

from __future__ import annotations

from enum import IntEnum


class Status(IntEnum):
    """Integer status codes returned by :mod:`ndinterp.capi`."""

    SUCCESS = 0
    SHAPE_MISMATCH = 1
    INSUFFICIENT_KNOTS = 2
    OUT_OF_DOMAIN = 3
    NON_POSITIVE_VALUE = 4


class InterpolationError(ValueError):
    """Base class for all grid interpolation errors."""

    status: Status = Status.SUCCESS


class ShapeMismatchError(InterpolationError):
    """Value array size is inconsistent with the axes and channel count."""

    status = Status.SHAPE_MISMATCH


class InsufficientKnotsError(InterpolationError):
    """A kernel needs more knots than its axis provides."""

    status = Status.INSUFFICIENT_KNOTS


class OutOfDomainError(InterpolationError):
    """Query coordinate lies outside an axis under the ``REJECT`` policy."""

    status = Status.OUT_OF_DOMAIN


class NonPositiveValueError(InterpolationError):
    """A log-space kernel met a sample that is zero or negative."""

    status = Status.NON_POSITIVE_VALUE
