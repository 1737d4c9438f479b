# src/mail_auditor/errors.py


class AnalysisError(Exception):
    """Base class for every error raised by the analysis engine."""


class FatalAnalysisError(AnalysisError):
    """
    An error that aborts the whole analysis.
    The engine cancels the remaining passes and re-raises it to the caller.
    """


class InputError(FatalAnalysisError):
    """The document is missing, unreadable or not text at all."""


class ParseError(FatalAnalysisError):
    """The document bytes could not be decoded into text."""


class DictionaryLoadError(FatalAnalysisError):
    """The affix dictionary used for spell checking could not be loaded."""


class ProbeError(AnalysisError):
    """A single network probe failed. Never aborts the analysis."""

    def __init__(self, url: str, reason: str):
        super().__init__(f"Probe failed for {url}: {reason}")
        self.url = url
        self.reason = reason
