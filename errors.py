"""Exception types raised by the feed pipeline."""

from __future__ import annotations


class FeedError(RuntimeError):
    """Base class for errors that end or degrade a pipeline run."""


class SourceUnavailableError(FeedError):
    """The source location could not be read at all."""


class TabularError(FeedError):
    """The source could not be interpreted as CSV.

    ``reason`` is a short machine-friendly code such as ``"no id column"``;
    the exception message is the text shown to the user.
    """

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class StructuredError(FeedError):
    """The source could not be interpreted as XML."""

    def __init__(self, diagnostics: list[str]) -> None:
        super().__init__("; ".join(diagnostics) or "no items found")
        self.diagnostics = list(diagnostics)


class DispatchError(FeedError):
    """Neither the XML nor the CSV reader could handle the source.

    Both underlying failures are kept so callers can inspect them; the
    message already combines them for display.
    """

    def __init__(
        self,
        message: str,
        structured: StructuredError | None = None,
        tabular: TabularError | None = None,
    ) -> None:
        super().__init__(message)
        self.structured = structured
        self.tabular = tabular


class WriteError(FeedError):
    """The supplemental feed could not be written to the target location."""


class ConfigError(FeedError):
    """A configured value cannot be used for a run."""
