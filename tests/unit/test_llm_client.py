import pytest
from unittest.mock import MagicMock, patch
from reviewlens.config import Settings
from reviewlens.llm.client import (
    GeminiModelClient,
    OpenAIModelClient,
    get_model_client,
    to_gemini_schema,
    to_strict_json_schema,
)
from reviewlens.llm.prompts import load_prompt


@pytest.fixture
def prompt():
    return load_prompt("review_analysis")

@pytest.fixture
def clear_client_cache():
    get_model_client.cache_clear()
    yield
    get_model_client.cache_clear()


def test_gemini_schema_conversion(prompt):
    """
    WHY: Gemini expects upper-case type names and marks string enums with format=enum.
    HOW: Convert the bundled JSON schema.
    EXPECTED: Types are upper-cased recursively, required list kept, enum flagged.
    """
    schema = to_gemini_schema(prompt.response_schema)

    assert schema["type"] == "OBJECT"
    assert schema["properties"]["top_themes"]["type"] == "ARRAY"
    assert schema["properties"]["top_themes"]["items"]["type"] == "STRING"
    assert schema["properties"]["confidence"]["type"] == "NUMBER"
    assert schema["properties"]["is_sarcastic"]["type"] == "BOOLEAN"
    assert schema["properties"]["sentiment"]["format"] == "enum"
    assert schema["required"] == prompt.required_fields
    # source data untouched
    assert prompt.response_schema["type"] == "object"


def test_strict_schema_conversion(prompt):
    schema = to_strict_json_schema(prompt.response_schema)

    assert schema["additionalProperties"] is False
    assert set(schema["required"]) == set(schema["properties"])
    assert "additionalProperties" not in prompt.response_schema


def test_gemini_request_shape(prompt):
    """
    WHY: The single outbound call must carry instruction, schema, user text and temperature 0.2 in JSON mode.
    HOW: Patch the `genai` module and run generate_json.
    EXPECTED: GenerativeModel gets the system instruction, GenerationConfig gets JSON mime type,
              converted schema and temperature; the user text is the content; raw text is returned.
    """
    with patch("reviewlens.llm.client.genai") as mock_genai:
        model = mock_genai.GenerativeModel.return_value
        response = model.generate_content.return_value
        response.candidates = [MagicMock()]
        response.candidates[0].content.parts = [MagicMock()]
        response.text = '{"sentiment": "Positive"}'

        client = GeminiModelClient(api_key="test-key", model="gemini-test")
        payload = client.generate_json(prompt, "Love it")

        mock_genai.configure.assert_called_once_with(api_key="test-key")
        mock_genai.GenerativeModel.assert_called_once_with(
            model_name="gemini-test",
            system_instruction=prompt.system_instruction,
        )
        mock_genai.GenerationConfig.assert_called_once_with(
            response_mime_type="application/json",
            response_schema=to_gemini_schema(prompt.response_schema),
            temperature=0.2,
        )
        assert model.generate_content.call_count == 1
        assert model.generate_content.call_args[0][0] == "Love it"
        assert payload == '{"sentiment": "Positive"}'


def test_gemini_empty_response(prompt):
    """
    WHY: A blocked or empty candidate has no text; that is "no payload", not a crash.
    HOW: Return a response without candidates.
    EXPECTED: generate_json returns None.
    """
    with patch("reviewlens.llm.client.genai") as mock_genai:
        response = mock_genai.GenerativeModel.return_value.generate_content.return_value
        response.candidates = []

        client = GeminiModelClient(api_key="test-key", model="gemini-test")
        assert client.generate_json(prompt, "Love it") is None


def test_openai_request_shape(prompt):
    """
    WHY: The OpenAI provider must send the same contract via strict json_schema response format.
    HOW: Patch `OpenAI` and run generate_json.
    EXPECTED: One create() call with system + user messages, strict schema, temperature 0.2;
              SDK retries disabled; message content returned.
    """
    with patch("reviewlens.llm.client.OpenAI") as mock_openai:
        create = mock_openai.return_value.chat.completions.create
        create.return_value = MagicMock(choices=[MagicMock(message=MagicMock(content='{"tone": "Calm"}'))])

        client = OpenAIModelClient(api_key="sk-test", model="gpt-test")
        payload = client.generate_json(prompt, "Meh")

        mock_openai.assert_called_once_with(api_key="sk-test", max_retries=0)
        create.assert_called_once()
        kwargs = create.call_args.kwargs
        assert kwargs["model"] == "gpt-test"
        assert kwargs["temperature"] == 0.2
        assert kwargs["messages"] == [
            {"role": "system", "content": prompt.system_instruction},
            {"role": "user", "content": "Meh"},
        ]
        fmt = kwargs["response_format"]
        assert fmt["type"] == "json_schema"
        assert fmt["json_schema"]["strict"] is True
        assert fmt["json_schema"]["schema"] == to_strict_json_schema(prompt.response_schema)
        assert payload == '{"tone": "Calm"}'


def test_openai_no_choices(prompt):
    with patch("reviewlens.llm.client.OpenAI") as mock_openai:
        mock_openai.return_value.chat.completions.create.return_value = MagicMock(choices=[])

        client = OpenAIModelClient(api_key="sk-test", model="gpt-test")
        assert client.generate_json(prompt, "Meh") is None


@pytest.mark.parametrize("cls", [GeminiModelClient, OpenAIModelClient])
def test_missing_api_key(cls):
    """
    WHY: Without a credential the call cannot succeed; fail before touching the network.
    HOW: Build each client with api_key=None.
    EXPECTED: ValueError naming the missing variable.
    """
    with pytest.raises(ValueError, match="API_KEY"):
        cls(api_key=None, model="m")


def test_provider_selection(clear_client_cache):
    """
    WHY: MODEL_PROVIDER picks which service the single request goes to.
    HOW: Patch settings to openai, then gemini, clearing the cache in between.
    EXPECTED: The matching client class with the configured model name.
    """
    openai_settings = Settings(MODEL_PROVIDER="openai", OPENAI_API_KEY="sk-test", MODEL_OPENAI="gpt-x")
    with patch("reviewlens.llm.client.get_settings", return_value=openai_settings), \
         patch("reviewlens.llm.client.OpenAI"):
        client = get_model_client()
        assert isinstance(client, OpenAIModelClient)
        assert client.model == "gpt-x"

    get_model_client.cache_clear()

    gemini_settings = Settings(MODEL_PROVIDER="gemini", GEMINI_API_KEY="g-test", MODEL_GEMINI="gemini-x")
    with patch("reviewlens.llm.client.get_settings", return_value=gemini_settings), \
         patch("reviewlens.llm.client.genai"):
        client = get_model_client()
        assert isinstance(client, GeminiModelClient)
        assert client.model == "gemini-x"
