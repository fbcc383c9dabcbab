"""Model service clients.

Each client issues exactly one structured-output request per call and returns
the raw textual payload; parsing and error mapping happen in analyze.py.
"""

import copy
from functools import lru_cache
from typing import Any, Dict, Optional

import google.generativeai as genai
from openai import OpenAI

from ..config import get_settings
from ..log import get_logger
from .prompts import PromptSpec

logger = get_logger("llm_client")

_GEMINI_SCHEMA_KEYS = {"type", "format", "description", "nullable", "enum", "items", "properties", "required"}


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a JSON schema to the subset Gemini accepts (upper-case type names)."""
    out: Dict[str, Any] = {}
    for key, value in schema.items():
        if key not in _GEMINI_SCHEMA_KEYS:
            continue
        if key == "type":
            out["type"] = str(value).upper()
        elif key == "items":
            out["items"] = to_gemini_schema(value)
        elif key == "properties":
            out["properties"] = {name: to_gemini_schema(sub) for name, sub in value.items()}
        else:
            out[key] = copy.deepcopy(value)

    if "enum" in out and "format" not in out:
        out["format"] = "enum"
    return out


def to_strict_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """OpenAI strict mode needs closed objects with every property required."""
    out = copy.deepcopy(schema)
    if out.get("type") == "object":
        properties = out.get("properties", {})
        out["properties"] = {name: to_strict_json_schema(sub) for name, sub in properties.items()}
        out["required"] = list(properties.keys())
        out["additionalProperties"] = False
    elif out.get("type") == "array" and "items" in out:
        out["items"] = to_strict_json_schema(out["items"])
    return out


class ModelClient:
    """One structured request in, raw text payload (or None) out."""

    model: str

    def generate_json(self, prompt: PromptSpec, content: str) -> Optional[str]:
        raise NotImplementedError


class GeminiModelClient(ModelClient):
    def __init__(self, api_key: Optional[str], model: str):
        if not api_key:
            raise ValueError("GEMINI_API_KEY required in .env")
        genai.configure(api_key=api_key)
        self.model = model

    def generate_json(self, prompt: PromptSpec, content: str) -> Optional[str]:
        model = genai.GenerativeModel(
            model_name=self.model,
            system_instruction=prompt.system_instruction,
        )
        response = model.generate_content(
            content,
            generation_config=genai.GenerationConfig(
                response_mime_type="application/json",
                response_schema=to_gemini_schema(prompt.response_schema),
                temperature=prompt.temperature,
            ),
        )

        # .text raises when the candidate has no text parts (e.g. blocked output)
        if not response.candidates or not response.candidates[0].content.parts:
            logger.warning(f"Gemini returned no content parts (feedback: {response.prompt_feedback})")
            return None
        return response.text


class OpenAIModelClient(ModelClient):
    def __init__(self, api_key: Optional[str], model: str):
        if not api_key:
            raise ValueError("OPENAI_API_KEY required in .env")
        # One request per analysis, no SDK-level retries
        self.client = OpenAI(api_key=api_key, max_retries=0)
        self.model = model

    def generate_json(self, prompt: PromptSpec, content: str) -> Optional[str]:
        completion = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": prompt.system_instruction},
                {"role": "user", "content": content},
            ],
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": prompt.name,
                    "schema": to_strict_json_schema(prompt.response_schema),
                    "strict": True,
                },
            },
            temperature=prompt.temperature,
        )
        if not completion.choices:
            return None
        return completion.choices[0].message.content


@lru_cache()
def get_model_client() -> ModelClient:
    settings = get_settings()
    logger.info(f"Using {settings.MODEL_PROVIDER} model {settings.model_name}")
    if settings.MODEL_PROVIDER == "openai":
        return OpenAIModelClient(api_key=settings.OPENAI_API_KEY, model=settings.MODEL_OPENAI)
    return GeminiModelClient(api_key=settings.GEMINI_API_KEY, model=settings.MODEL_GEMINI)
