from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import Literal, Optional

class Settings(BaseSettings):
    MODEL_PROVIDER: Literal["gemini", "openai"] = Field("gemini", description="Which model service to call")
    GEMINI_API_KEY: Optional[str] = Field(None, description="Google Gemini API Key")
    OPENAI_API_KEY: Optional[str] = Field(None, description="OpenAI API Key")
    MODEL_GEMINI: str = "gemini-2.5-flash"
    MODEL_OPENAI: str = "gpt-4o"
    PROMPT_NAME: str = Field("review_analysis", description="Prompt/schema file under data/prompts")
    APP_TITLE: str = "ReviewLens AI"
    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def model_name(self) -> str:
        if self.MODEL_PROVIDER == "openai":
            return self.MODEL_OPENAI
        return self.MODEL_GEMINI

@lru_cache()
def get_settings() -> Settings:
    return Settings()
