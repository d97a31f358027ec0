"""
Exception types raised by colorquant.

Both concrete errors subclass ValueError so callers that only guard
against bad input with ``except ValueError`` keep working.
"""


class ColorQuantError(Exception):
    """Base class for all colorquant errors."""


class InvalidArgumentError(ColorQuantError, ValueError):
    """
    A precondition of a clustering run was violated.

    Raised before any iteration starts: empty or ragged input, non-finite
    values, k < 1, max_iterations < 1, or k larger than the number of
    distinct-valued points (initialization could never pick k distinct
    centroids).
    """


class ImageFormatError(ColorQuantError, ValueError):
    """An image could not be decoded or does not have an (H, W, C) layout."""
