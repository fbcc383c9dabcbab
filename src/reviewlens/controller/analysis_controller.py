"""Analysis controller: idle -> loading -> success | error.

Holds the one piece of mutable state in the app and guarantees that at most
one model request is outstanding at a time.
"""

import threading
from typing import Optional

from ..llm.analyze import AnalysisErr, FALLBACK_ERROR_MESSAGE, analyze_review
from ..llm.client import ModelClient
from ..log import get_logger
from .state import AnalysisState

logger = get_logger("controller")


class AnalysisInFlightError(RuntimeError):
    """Raised when an analysis is requested while another is still loading."""


class AnalysisController:
    def __init__(self, client: Optional[ModelClient] = None, prompt_name: Optional[str] = None):
        self.client = client
        self.prompt_name = prompt_name
        self._state = AnalysisState.idle()
        self._lock = threading.Lock()

    @property
    def state(self) -> AnalysisState:
        return self._state

    def run_analysis(self, input_text: str) -> AnalysisState:
        """
        Analyze input_text and return the settled state.

        Blank input is a no-op and returns the current state untouched.
        Raises AnalysisInFlightError if a previous call has not settled yet.
        """
        if not input_text or not input_text.strip():
            logger.debug("Ignoring blank input")
            return self._state

        with self._lock:
            if self._state.is_loading:
                raise AnalysisInFlightError("An analysis is already running.")
            self._state = AnalysisState.loading(input_text)

        outcome = AnalysisErr(message=FALLBACK_ERROR_MESSAGE)
        try:
            outcome = analyze_review(input_text, client=self.client, prompt_name=self.prompt_name)
        finally:
            self._state = AnalysisState.settled(input_text, outcome)

        logger.info(f"Analysis settled: {self._state.status.value}")
        return self._state
