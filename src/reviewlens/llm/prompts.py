"""Prompt/schema definitions loaded from YAML.

A prompt file carries everything the model call needs besides the user text:
the system instruction, the response schema and the decoding temperature.
"""

from __future__ import annotations

import yaml
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, List
from pydantic import BaseModel, Field, model_validator

PROMPTS_DIR = Path(__file__).resolve().parent.parent / "data" / "prompts"


class PromptSpec(BaseModel):
    name: str
    version: int = 1
    description: str = ""
    temperature: float = Field(0.2, ge=0.0, le=2.0)
    system_instruction: str = Field(..., min_length=1)
    response_schema: Dict[str, Any]

    @model_validator(mode="after")
    def validate_schema(self) -> "PromptSpec":
        schema = self.response_schema
        if schema.get("type") != "object":
            raise ValueError(f"response_schema must be an object schema -> {schema.get('type')!r}")

        properties = schema.get("properties") or {}
        if not properties:
            raise ValueError("response_schema declares no properties")

        for field in schema.get("required", []):
            if field not in properties:
                raise ValueError(f"required field is not a declared property -> {field!r}")

        return self

    @property
    def required_fields(self) -> List[str]:
        return list(self.response_schema.get("required", []))


@lru_cache()
def load_prompt(name: str) -> PromptSpec:
    path = PROMPTS_DIR / f"{name}.yaml"
    if not path.exists():
        raise FileNotFoundError(f"Prompt {name} not found at {path}")

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    data.setdefault("name", name)
    return PromptSpec.model_validate(data)
