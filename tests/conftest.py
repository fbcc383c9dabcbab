import json
import os
import pytest
from typing import List, Optional, Tuple
from unittest.mock import patch
from dotenv import load_dotenv

from reviewlens.llm.client import ModelClient
from reviewlens.llm.prompts import PromptSpec

@pytest.fixture(scope="session", autouse=True)
def _load_env():
    # Load .env once per session to avoid side-effects on import time
    load_dotenv()

def _truthy(v: str | None) -> bool:
    return v is not None and v.strip().lower() not in ("", "0", "false", "no")

@pytest.fixture(scope="session")
def allow_integration(_load_env) -> bool:
    # Depends on _load_env to ensure .env is loaded first
    return _truthy(os.getenv("RUN_INTEGRATION_TESTS"))

@pytest.fixture(scope="session")
def gemini_api_key(_load_env) -> str | None:
    key = os.getenv("GEMINI_API_KEY")
    if not key:
        return None
    return key


class FakeModelClient(ModelClient):
    """
    Stands in for the model service. Records every request.
    on_call runs inside the request, before it resolves.
    """
    model = "fake-model"

    def __init__(self, payload: Optional[str] = None, error: Optional[Exception] = None, on_call=None):
        self.payload = payload
        self.error = error
        self.on_call = on_call
        self.calls: List[Tuple[PromptSpec, str]] = []

    def generate_json(self, prompt: PromptSpec, content: str) -> Optional[str]:
        self.calls.append((prompt, content))
        if self.on_call:
            self.on_call()
        if self.error:
            raise self.error
        return self.payload


@pytest.fixture
def fake_client():
    """Factory: fake_client(payload=..., error=..., on_call=...)."""
    return FakeModelClient

@pytest.fixture
def sample_result_dict():
    return {
        "sentiment": "Mixed",
        "confidence": 0.87,
        "top_themes": ["Battery Life", "Packaging", "Delivery"],
        "tone": "Frustration",
        "is_sarcastic": True,
        "summary": "The battery is great but packaging and a three week delivery spoiled the experience.",
    }

@pytest.fixture
def sample_payload(sample_result_dict) -> str:
    return json.dumps(sample_result_dict)

@pytest.fixture
def no_model_client():
    """
    Guarantees no test reaches a real provider by accident.
    """
    with patch("reviewlens.llm.analyze.get_model_client", side_effect=ValueError("GEMINI_API_KEY required in .env")) as mock:
        yield mock
