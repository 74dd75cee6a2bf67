# src/ampify/core/exceptions.py


class AmpifyError(Exception):
    """Base class for expected failures while converting a page."""


class RenderError(AmpifyError):
    """The page could not be rendered or fetched."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Could not load {url}: {reason}")


class ValidatorUnavailableError(AmpifyError):
    """The AMP validator could not be run or returned unreadable output."""


class ConversionError(AmpifyError):
    """Invalid input to the conversion pipeline (bad URL, unwritable output)."""
