from __future__ import annotations


class TabshaperError(Exception):
    """Base exception for tabshaper user-facing errors."""


class UnsupportedMethodError(TabshaperError):
    """Raised when a method is unknown or does not fit the column type."""


class MissingTargetError(TabshaperError):
    """Raised when a target-requiring method is called without a target."""


class DegenerateRangeError(TabshaperError):
    """Raised for zero-range or zero-variance input to a scaling transform."""


class TransformDomainError(TabshaperError):
    """Raised when a transform is undefined on part of the column domain."""


class NonBinaryTargetError(TabshaperError):
    """Raised when optimal binning gets a target without exactly two classes."""


class LabelCountMismatchError(TabshaperError):
    """Raised when supplied bin labels do not match the interval count."""


class UnsupportedOutputFormatError(TabshaperError):
    """Raised for report formats other than pdf and html."""


class RenderError(TabshaperError):
    """Raised when a report document could not be written."""


class ColumnNotFoundError(TabshaperError, KeyError):
    """Raised when a named column is not part of the table."""

    def __str__(self) -> str:
        # KeyError would otherwise quote the message
        return str(self.args[0]) if self.args else ""
