"""Gemini access and the structured plan-generation adapter."""

import asyncio
import json
import logging
import re
from abc import ABC, abstractmethod
from typing import Optional

from google import genai
from google.genai import types
from pydantic import ValidationError as PydanticValidationError

from fitcoach.config import get_settings
from fitcoach.errors import GenerationFailedError, InvalidGeneratedStructureError
from fitcoach.schemas import PlanDraft

logger = logging.getLogger(__name__)

settings = get_settings()

FENCE_RE = re.compile(r"```(?:json)?\s*\n?(.*?)\n?\s*```", re.DOTALL | re.IGNORECASE)


class GeminiProvider:
    """Gemini provider using the google-genai SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.gemini_api_key
        self.model = model or settings.gemini_model
        self.temperature = settings.generation_temperature if temperature is None else temperature
        self._client = None

    @property
    def client(self) -> genai.Client:
        # Created lazily so importing the app never needs an API key.
        if self._client is None:
            self._client = genai.Client(api_key=self.api_key)
        return self._client

    async def complete(self, prompt: str, json_mode: bool = True) -> str:
        """Send one user prompt and return the concatenated text parts."""
        config = types.GenerateContentConfig(
            temperature=self.temperature,
            response_mime_type="application/json" if json_mode else "text/plain",
        )
        contents = [types.Content(role="user", parts=[types.Part.from_text(text=prompt)])]

        response = await self.client.aio.models.generate_content(
            model=self.model,
            contents=contents,
            config=config,
        )

        text_parts = []
        if response.candidates:
            cand = response.candidates[0]
            if cand.content and cand.content.parts:
                for part in cand.content.parts:
                    # Skip thought parts, keep the answer only
                    if getattr(part, "thought", False):
                        continue
                    if part.text:
                        text_parts.append(part.text)
        return "".join(text_parts)


def strip_code_fence(text: str) -> str:
    """Return the body of a ```json ... ``` (or bare ```) block, else the text itself."""
    match = FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def parse_plan_draft(text: Optional[str]) -> PlanDraft:
    """Turn raw generator output into a PlanDraft.

    Empty text, invalid JSON or a non-object payload raise
    GenerationFailedError; a JSON object of the wrong shape raises
    InvalidGeneratedStructureError.
    """
    if not text or not text.strip():
        raise GenerationFailedError("The generation service returned an empty response.")

    body = strip_code_fence(text)
    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error(f"Generated plan is not valid JSON: {exc}")
        raise GenerationFailedError(
            "Failed to parse the generated plan.", detail=f"JSON error at line {exc.lineno}, column {exc.colno}"
        ) from exc

    if not isinstance(payload, dict):
        raise GenerationFailedError(
            "Failed to parse the generated plan.", detail=f"expected a JSON object, got {type(payload).__name__}"
        )

    try:
        return PlanDraft.model_validate(payload)
    except PydanticValidationError as exc:
        logger.error(f"Generated plan has an unexpected structure: {exc.error_count()} errors")
        raise InvalidGeneratedStructureError(detail=f"{exc.error_count()} structural errors") from exc


class PlanGenerationAdapter(ABC):
    """Narrow interface between the plan synthesizer and a text generator."""

    @abstractmethod
    async def generate_structured_plan(self, prompt: str) -> PlanDraft:
        """Return the generated plan, or raise GenerationFailedError or InvalidGeneratedStructureError."""


class GeminiPlanAdapter(PlanGenerationAdapter):
    """Generates a PlanDraft with Gemini, bounded by a timeout."""

    def __init__(self, provider: Optional[GeminiProvider] = None, timeout: Optional[float] = None):
        self.provider = provider or GeminiProvider()
        self.timeout = settings.generation_timeout_seconds if timeout is None else timeout

    async def generate_structured_plan(self, prompt: str) -> PlanDraft:
        try:
            text = await asyncio.wait_for(self.provider.complete(prompt), timeout=self.timeout)
        except asyncio.TimeoutError as exc:
            logger.error(f"Plan generation timed out after {self.timeout}s")
            raise GenerationFailedError("Plan generation timed out.") from exc
        except Exception as exc:
            logger.error(f"Gemini call failed: {exc}")
            raise GenerationFailedError(
                "The plan generation service is unavailable.", detail=type(exc).__name__
            ) from exc

        return parse_plan_draft(text)
