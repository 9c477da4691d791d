"""LLM backends used by the AI extraction tiers"""
import base64
import logging
from abc import ABC, abstractmethod
from typing import List

from openai import OpenAI, OpenAIError

from .config import ConverterConfig, OPENAI_MODEL, GRADIENT_MODEL
from .errors import AIUnavailableError


logger = logging.getLogger(__name__)

SYSTEM_MESSAGE = "You are a precise document extraction assistant. Return only valid JSON."


class LLMBackend(ABC):
    """A remote model able to complete an extraction prompt"""

    name = "llm"
    supports_documents = False

    @abstractmethod
    def complete_from_text(self, prompt: str) -> str:
        """Return the raw completion for a text-only prompt"""

    def complete_from_document(self, prompt: str, pdf_bytes: bytes,
                               filename: str = "document.pdf") -> str:
        """Return the raw completion for a prompt submitted with a PDF"""
        raise AIUnavailableError(f"{self.name} backend cannot read documents")


class OpenAICompatibleBackend(LLMBackend):
    """Chat-completions backend; one single-shot call per request, no retries"""

    def __init__(self, api_key: str, model: str, *,
                 base_url: str = None,
                 timeout: float = 30.0,
                 temperature: float = 0.1,
                 max_tokens: int = 2000,
                 client: OpenAI = None):
        if not api_key and client is None:
            raise AIUnavailableError(f"{self.name} API key not configured")
        self.client = client or OpenAI(
            api_key=api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=0,
        )
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens

    def complete_from_text(self, prompt: str) -> str:
        return self._complete([
            {"role": "system", "content": SYSTEM_MESSAGE},
            {"role": "user", "content": prompt},
        ])

    def _complete(self, messages: List[dict]) -> str:
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except OpenAIError as e:
            raise AIUnavailableError(f"{self.name} request failed: {e}") from e

        if not response.choices:
            return ""
        completion = response.choices[0].message.content or ""
        logger.debug("%s response: %s", self.name, completion[:200])
        return completion


class OpenAIBackend(OpenAICompatibleBackend):
    """OpenAI: reads PDFs directly (including scanned pages) and plain text"""

    name = "openai"
    supports_documents = True

    def complete_from_document(self, prompt: str, pdf_bytes: bytes,
                               filename: str = "document.pdf") -> str:
        encoded = base64.b64encode(pdf_bytes).decode("utf-8")
        return self._complete([
            {"role": "system", "content": SYSTEM_MESSAGE},
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {
                        "type": "file",
                        "file": {
                            "filename": filename or "document.pdf",
                            "file_data": f"data:application/pdf;base64,{encoded}",
                        },
                    },
                ],
            },
        ])


class GradientBackend(OpenAICompatibleBackend):
    """Gradient serverless inference: text completion only"""

    name = "gradient"
    supports_documents = False


def build_backends(config: ConverterConfig) -> List[LLMBackend]:
    """
    Instantiate every configured backend in preference order

    Document-capable (OpenAI) first, then text-only (Gradient).
    """
    common = dict(
        timeout=config.ai_timeout,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )
    backends: List[LLMBackend] = []
    if config.openai_api_key:
        backends.append(OpenAIBackend(
            config.openai_api_key,
            config.model_for("openai", OPENAI_MODEL),
            **common,
        ))
    if config.gradient_api_key:
        backends.append(GradientBackend(
            config.gradient_api_key,
            config.model_for("gradient", GRADIENT_MODEL),
            base_url=config.gradient_base_url,
            **common,
        ))
    return backends
