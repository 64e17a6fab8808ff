"""Errors raised while loading question data."""


class QuizBankError(Exception):
    """Base exception for question loading errors."""
    pass


class LoadError(QuizBankError):
    """A requested question source could not be fetched or decoded."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Failed to load {url}: {reason}")
