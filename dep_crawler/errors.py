"""Exception types raised by the crawler core."""

from __future__ import annotations


class DepCrawlerError(Exception):
    """Base class for all dep-crawler errors."""


class PatternCompileError(DepCrawlerError):
    """A pattern table entry failed to compile. Fatal at startup."""

    def __init__(self, language: str, layer: str, pattern: str, reason: str):
        self.language = language
        self.layer = layer
        self.pattern = pattern
        super().__init__(
            f"Invalid {layer} pattern for {language}: {pattern!r} ({reason})"
        )


class ExtractionError(DepCrawlerError):
    """Building a record for one file failed; only that file is dropped."""


class ConsumedRecordError(DepCrawlerError):
    """An extraction record was used after its contents were moved out."""


class OwnershipError(DepCrawlerError):
    """A record was adopted by a second owner or released twice."""
