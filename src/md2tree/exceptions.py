"""Custom exceptions for md2tree."""


class Md2treeError(Exception):
    """Base exception for md2tree operations."""


class SourceReadError(Md2treeError):
    """Markdown source could not be read or decoded."""


class OutputFormatError(Md2treeError, ValueError):
    """Requested output format is not supported."""


class InvalidLevelError(Md2treeError, ValueError):
    """Requested heading level is outside 1-6."""
