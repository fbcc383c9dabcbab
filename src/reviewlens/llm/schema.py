"""Pydantic schema for the review analysis output.

Defines AnalysisResult - the six-field structured result the model is constrained to return.
"""

from __future__ import annotations

from typing import List, Literal
from pydantic import BaseModel, Field

Sentiment = Literal["Positive", "Negative", "Neutral", "Mixed"]


class AnalysisResult(BaseModel):
    """
    LLM output for one review.
    All fields are required; a payload missing any of them is a malformed response.
    """
    sentiment: Sentiment = Field(..., description="Overall sentiment label.")
    confidence: float = Field(..., ge=0.0, le=1.0, description="Confidence score from 0.0 to 1.0.")
    top_themes: List[str] = Field(..., description="Product features or aspects, in model output order.")
    tone: str = Field(..., description="Underlying emotional register.")
    is_sarcastic: bool = Field(..., description="Whether the reviewer is being sarcastic.")
    summary: str = Field(..., description="One sentence summary of the reviewer's main point.")


def parse_analysis(payload: str) -> AnalysisResult:
    """Parse a raw JSON payload. Raises pydantic.ValidationError on any mismatch."""
    return AnalysisResult.model_validate_json(payload)
