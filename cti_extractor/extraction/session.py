"""Tracks the state of the extraction shown to the user."""

import logging
import threading
from dataclasses import dataclass
from typing import Optional

from .client import GeminiExtractor
from .errors import ErrorKind, ExtractionError
from .models import ExtractionResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseState:
    is_parsing: bool = False
    error: Optional[ExtractionError] = None
    result: Optional[ExtractionResult] = None


class ExtractionSession:
    """
    Holds the one extraction that is meaningful to display.

    Every request gets a ticket. Completing or failing with a ticket other
    than the latest is ignored, so a new request supersedes any request
    still in flight without cancelling it.
    """

    def __init__(self, extractor: GeminiExtractor):
        self.extractor = extractor
        self.state = ParseState()
        self._ticket = 0
        self._lock = threading.Lock()

    @property
    def needs_credential(self) -> bool:
        """True when the last request failed for lack of a valid credential."""
        error = self.state.error
        return error is not None and error.kind == ErrorKind.AUTH

    def begin(self) -> int:
        """Start a request and return its ticket. The previous result stays visible."""
        with self._lock:
            self._ticket += 1
            self.state = ParseState(is_parsing=True, result=self.state.result)
            return self._ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._ticket

    def complete(self, ticket: int, result: ExtractionResult) -> bool:
        """Record a result. Returns False if the ticket was superseded."""
        with self._lock:
            if not self.is_current(ticket):
                logger.debug(f"Discarding result of superseded request {ticket}")
                return False
            self.state = ParseState(result=result)
            return True

    def fail(self, ticket: int, error: ExtractionError) -> bool:
        """Record a failure. Returns False if the ticket was superseded."""
        with self._lock:
            if not self.is_current(ticket):
                logger.debug(f"Discarding failure of superseded request {ticket}: {error}")
                return False
            self.state = ParseState(error=error)
            return True

    def submit(self, text: str) -> ParseState:
        """
        Run an extraction for the text and return the resulting state.

        Blank text is ignored and leaves the state untouched.
        """
        if not text or not text.strip():
            return self.state

        ticket = self.begin()
        try:
            result = self.extractor.extract(text)
        except ExtractionError as e:
            logger.warning(f"Extraction failed ({e.kind.value}): {e}")
            self.fail(ticket, e)
        except Exception:
            self._abort(ticket)
            raise
        else:
            self.complete(ticket, result)

        return self.state

    def _abort(self, ticket: int):
        """Stop parsing for a request that raised something other than an ExtractionError."""
        with self._lock:
            if self.is_current(ticket):
                self.state = ParseState(result=self.state.result)

    def clear(self):
        """Reset to the idle state and supersede any request in flight."""
        with self._lock:
            self._ticket += 1
            self.state = ParseState()
