"""Analysis state held by the controller.

States are immutable; every transition builds a new AnalysisState.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional
from pydantic import BaseModel, ConfigDict

from ..llm.analyze import AnalysisOk, AnalysisOutcome
from ..llm.schema import AnalysisResult


class AnalysisStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


class AnalysisState(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: AnalysisStatus = AnalysisStatus.IDLE
    input_text: str = ""
    result: Optional[AnalysisResult] = None
    error: Optional[str] = None

    @property
    def is_loading(self) -> bool:
        return self.status is AnalysisStatus.LOADING

    @classmethod
    def idle(cls) -> "AnalysisState":
        return cls()

    @classmethod
    def loading(cls, input_text: str) -> "AnalysisState":
        # Prior result and error are dropped here
        return cls(status=AnalysisStatus.LOADING, input_text=input_text)

    @classmethod
    def settled(cls, input_text: str, outcome: AnalysisOutcome) -> "AnalysisState":
        if isinstance(outcome, AnalysisOk):
            return cls(status=AnalysisStatus.SUCCESS, input_text=input_text, result=outcome.result)
        return cls(status=AnalysisStatus.ERROR, input_text=input_text, error=outcome.message)
