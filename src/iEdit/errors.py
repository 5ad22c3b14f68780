"""Exception hierarchy shared by the editing pipeline and its front ends."""

from __future__ import annotations


class IEditError(Exception):
    """Base class for every recoverable editor error."""


class InvalidInputError(IEditError):
    """Raised when the supplied data is not a decodable raster image."""


class InvalidParameterError(IEditError):
    """Raised for unknown adjustment names or values that are not numbers."""


class RenderError(IEditError):
    """Raised when a surface cannot be composed from the current state."""


class EncodeError(IEditError):
    """Raised when an export is requested without a rendered surface."""


__all__ = [
    "EncodeError",
    "IEditError",
    "InvalidInputError",
    "InvalidParameterError",
    "RenderError",
]
