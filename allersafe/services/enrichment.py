"""
Optional AI enrichment for analyses, dietary plans and chat answers.

Providers are tried in configured order (OpenAI chat completions, then the
Hugging Face inference API). Every provider call carries its own timeout,
and callers that run enrichment alongside their own work wait at most
``enrichment_timeout_seconds`` for it. Whatever happens, the service hands
back either an ``EnrichmentResult`` or ``None``; it never raises, and it never
sees scores, detections or restrictions.
"""
import os
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Sequence

import requests
from openai import OpenAI

from allersafe.core.engine_config import EngineConfig, load_engine_config
from allersafe.core.errors import EnrichmentUnavailable
from allersafe.core.logging_config import get_logger

logger = get_logger(__name__)

SYSTEM_PROMPT = (
    "You are an allergy-aware nutrition assistant. Give short, practical guidance. "
    "Never claim certainty about whether a product is safe and always defer to a doctor."
)

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="enrichment")


@dataclass(frozen=True)
class EnrichmentResult:
    text: str
    provider: str


class EnrichmentProvider(ABC):
    name: str = "Unknown"

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Return generated text for the prompt.
        Must raise EnrichmentUnavailable when no usable text was produced.
        """
        pass


class OpenAIProvider(EnrichmentProvider):
    name = "openai"

    def __init__(self, api_key: str, model: str, timeout_seconds: float):
        self.model = model
        self.client = OpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0)

    def generate(self, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
            temperature=0.2,
            max_tokens=400
        )
        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise EnrichmentUnavailable(self.name, "empty completion")
        return content.strip()


class HuggingFaceProvider(EnrichmentProvider):
    name = "huggingface"

    def __init__(self, api_url: str, timeout_seconds: float, api_token: Optional[str] = None):
        self.api_url = api_url
        self.timeout_seconds = timeout_seconds
        self.api_token = api_token

    def generate(self, prompt: str) -> str:
        headers = {"Content-Type": "application/json"}
        if self.api_token:
            headers["Authorization"] = f"Bearer {self.api_token}"
        payload = {
            "inputs": prompt,
            "parameters": {
                "max_length": 300,
                "temperature": 0.1,
                "return_full_text": False
            }
        }
        try:
            response = requests.post(self.api_url, json=payload, headers=headers, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise EnrichmentUnavailable(self.name, f"request failed: {exc}") from exc

        if not response.ok:
            raise EnrichmentUnavailable(self.name, f"HTTP {response.status_code}")

        try:
            data = response.json()
        except ValueError as exc:
            raise EnrichmentUnavailable(self.name, "response was not JSON") from exc

        text = _extract_generated_text(data)
        if not text:
            raise EnrichmentUnavailable(self.name, "no generated text")
        return text


def _extract_generated_text(data: Any) -> Optional[str]:
    if isinstance(data, list) and data:
        data = data[0]
    if isinstance(data, dict):
        text = data.get("generated_text")
        if isinstance(text, str) and text.strip():
            return text.strip()
    return None


def build_default_providers(config: EngineConfig) -> List[EnrichmentProvider]:
    providers: List[EnrichmentProvider] = []
    for name in config.enrichment_providers:
        if name == OpenAIProvider.name:
            api_key = os.getenv("OPENAI_API_KEY")
            if not api_key:
                logger.warning("OPENAI_API_KEY not set. OpenAI enrichment will be skipped.")
                continue
            providers.append(OpenAIProvider(api_key, config.openai_model, config.enrichment_timeout_seconds))
        elif name == HuggingFaceProvider.name:
            providers.append(HuggingFaceProvider(
                config.hf_api_url,
                config.enrichment_timeout_seconds,
                api_token=os.getenv("HF_API_TOKEN")
            ))
        else:
            logger.warning(f"Unknown enrichment provider '{name}' ignored.")
    return providers


class EnrichmentService:
    def __init__(
        self,
        providers: Optional[Iterable[EnrichmentProvider]] = None,
        config: Optional[EngineConfig] = None
    ):
        self.config = config or load_engine_config()
        self.enabled = self.config.enrichment_enabled
        self.timeout_seconds = self.config.enrichment_timeout_seconds
        if providers is not None:
            self.providers: List[EnrichmentProvider] = list(providers)
        elif self.enabled:
            self.providers = build_default_providers(self.config)
        else:
            self.providers = []

    @property
    def available(self) -> bool:
        return self.enabled and bool(self.providers)

    def generate(self, prompt: str) -> Optional[EnrichmentResult]:
        """
        Try each provider in order and return the first usable text.

        Returns:
            EnrichmentResult, or None when enrichment is off or every provider failed.
        """
        if not self.available:
            return None

        for provider in self.providers:
            try:
                text = provider.generate(prompt)
            except EnrichmentUnavailable as exc:
                logger.warning(f"Enrichment provider unavailable: {exc}")
                continue
            except Exception as exc:
                logger.error(f"Enrichment provider {provider.name} failed: {exc}")
                continue

            text = (text or "").strip()
            if text:
                return EnrichmentResult(text=text, provider=provider.name)
            logger.warning(f"Enrichment provider {provider.name} returned blank text")

        return None

    def submit(self, prompt: str) -> Optional[Future]:
        """Start enrichment in the background; None when there is nothing to run."""
        if not self.available:
            return None
        return _executor.submit(self.generate, prompt)

    def collect(self, pending: Optional[Future]) -> Optional[EnrichmentResult]:
        """Wait a bounded time for a submitted enrichment."""
        if pending is None:
            return None
        try:
            return pending.result(timeout=self.timeout_seconds)
        except FutureTimeoutError:
            pending.cancel()
            logger.warning(f"Enrichment timed out after {self.timeout_seconds}s; continuing without it")
            return None
        except Exception as exc:
            logger.error(f"Enrichment task failed: {exc}")
            return None

    def enrich(self, prompt: str) -> Optional[EnrichmentResult]:
        return self.collect(self.submit(prompt))


def build_analysis_prompt(ingredients: Sequence[str], allergies: Sequence[str]) -> str:
    return f"""Analyze these food ingredients for allergens: {', '.join(ingredients)}

Known user allergies: {', '.join(allergies) if allergies else 'none reported'}

Identify potential allergens and comment briefly on:
1. Hidden allergen sources
2. Cross-contamination risks
3. Alternative suggestions

Keep the answer under 120 words."""


def build_plan_prompt(allergies: Sequence[str]) -> str:
    if not allergies:
        return "Give brief healthy-eating guidance for someone with no known food allergies."
    return (
        f"Create dietary recommendations for someone with allergies to: {', '.join(allergies)}. "
        "Include safe foods, foods to avoid, and meal suggestions."
    )


def build_chat_prompt(message: str, allergies: Sequence[str]) -> str:
    context = f"User allergies: {', '.join(allergies) if allergies else 'none reported'}. User message: {message}"
    return f"As an allergy specialist assistant, respond helpfully to: {context}"


enrichment_service = EnrichmentService()
