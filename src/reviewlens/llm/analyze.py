"""Single review analysis.

Sends one review to the model service and turns every possible outcome into
an explicit AnalysisOk / AnalysisErr value. Nothing raised by the call escapes.
"""

from typing import Literal, Optional, Union
from pydantic import BaseModel, ValidationError

from ..log import get_logger
from .client import ModelClient, get_model_client
from .prompts import PromptSpec, load_prompt
from .schema import AnalysisResult, parse_analysis
from ..config import get_settings

logger = get_logger("analyze")

NO_ANALYSIS_MESSAGE = "No analysis received from the model."
PARSE_FAILURE_MESSAGE = "The model response could not be parsed into an analysis."
FALLBACK_ERROR_MESSAGE = "An unexpected error occurred during analysis."


class AnalysisOk(BaseModel):
    kind: Literal["ok"] = "ok"
    result: AnalysisResult


class AnalysisErr(BaseModel):
    kind: Literal["error"] = "error"
    message: str


AnalysisOutcome = Union[AnalysisOk, AnalysisErr]


def analyze_review(
    text: str,
    client: Optional[ModelClient] = None,
    prompt: Optional[PromptSpec] = None,
    prompt_name: Optional[str] = None,
) -> AnalysisOutcome:
    """
    Analyze one review with a single model request.

    Args:
        text: Raw review text, sent as-is
        client: Model client; the configured provider when omitted
        prompt: Prompt/schema definition; loaded by prompt_name when omitted
        prompt_name: Prompt file name; settings.PROMPT_NAME when omitted

    Returns:
        AnalysisOk with the parsed result, or AnalysisErr with a user-facing message
    """
    try:
        prompt = prompt or load_prompt(prompt_name or get_settings().PROMPT_NAME)
        client = client or get_model_client()
        logger.info(f"Requesting analysis ({len(text)} chars, prompt {prompt.name} v{prompt.version})")
        payload = client.generate_json(prompt, text)
    except Exception as e:
        logger.exception("Analysis request failed")
        return AnalysisErr(message=str(e) or FALLBACK_ERROR_MESSAGE)

    if not payload:
        logger.warning("Model returned an empty payload")
        return AnalysisErr(message=NO_ANALYSIS_MESSAGE)

    try:
        result = parse_analysis(payload)
    except ValidationError as e:
        logger.warning(f"Malformed analysis payload: {e.error_count()} error(s): {payload[:200]!r}")
        return AnalysisErr(message=PARSE_FAILURE_MESSAGE)

    logger.info(f"Analysis complete: {result.sentiment} ({result.confidence:.2f})")
    return AnalysisOk(result=result)
