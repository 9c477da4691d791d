"""Configuration settings for the ICS-205 to CHIRP converter"""
import os
from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple
from dotenv import load_dotenv


# LLM decoding: structured extraction, not creative generation
LLM_TEMPERATURE = 0.1
LLM_MAX_TOKENS = 2000
AI_TIMEOUT_SECONDS = 30.0

# Model defaults per backend
OPENAI_MODEL = "gpt-4o"
GRADIENT_MODEL = "llama3.3-70b-instruct"
GRADIENT_BASE_URL = "https://inference.do-ai.run/v1"

# HTTP surface
MAX_UPLOAD_MB = 10
ALLOWED_ORIGINS = (
    "http://localhost:8000",
    "http://localhost:3000",
)


@dataclass(frozen=True)
class ConverterConfig:
    """Explicit configuration handed to the converter factory"""
    openai_api_key: Optional[str] = None
    gradient_api_key: Optional[str] = None
    gradient_base_url: str = GRADIENT_BASE_URL
    model_overrides: Dict[str, str] = field(default_factory=dict)
    document_ai: bool = True
    ai_timeout: float = AI_TIMEOUT_SECONDS
    temperature: float = LLM_TEMPERATURE
    max_tokens: int = LLM_MAX_TOKENS
    allowed_origins: Tuple[str, ...] = ALLOWED_ORIGINS
    max_upload_bytes: int = MAX_UPLOAD_MB * 1024 * 1024

    @property
    def document_ai_enabled(self) -> bool:
        return bool(self.openai_api_key) and self.document_ai

    @property
    def text_ai_enabled(self) -> bool:
        return bool(self.openai_api_key) or bool(self.gradient_api_key)

    def model_for(self, backend: str, default: str) -> str:
        return self.model_overrides.get(backend) or default

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> 'ConverterConfig':
        """Load a .env file (if any) and read settings from the environment"""
        load_dotenv(env_file)

        overrides = {}
        if os.getenv("OPENAI_MODEL"):
            overrides["openai"] = os.getenv("OPENAI_MODEL")
        if os.getenv("GRADIENT_AI_MODEL"):
            overrides["gradient"] = os.getenv("GRADIENT_AI_MODEL")

        origins = os.getenv("ICS205_ALLOWED_ORIGINS")
        if origins:
            allowed = tuple(o.strip() for o in origins.split(",") if o.strip())
        else:
            allowed = ALLOWED_ORIGINS

        return cls(
            openai_api_key=os.getenv("OPENAI_API_KEY") or None,
            gradient_api_key=os.getenv("GRADIENT_AI_API_KEY") or None,
            gradient_base_url=os.getenv("GRADIENT_AI_BASE_URL", GRADIENT_BASE_URL),
            model_overrides=overrides,
            document_ai=os.getenv("ICS205_DOCUMENT_AI", "1") != "0",
            ai_timeout=float(os.getenv("ICS205_AI_TIMEOUT", AI_TIMEOUT_SECONDS)),
            allowed_origins=allowed,
            max_upload_bytes=int(float(os.getenv("ICS205_MAX_UPLOAD_MB", MAX_UPLOAD_MB)) * 1024 * 1024),
        )
