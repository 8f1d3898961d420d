# src/translation/prompts.py — v1
"""System instructions for provider calls and parsing of structured replies."""

from __future__ import annotations

import json
import re

from pydantic import BaseModel, Field

from medtranslate.core.models import MedicalTerm, unique_terms

# Language pair used by the analyzer to request a plain-language rewrite.
SIMPLIFY_SOURCE = "medical"
SIMPLIFY_TARGET = "simple"

_TRANSLATE_SYSTEM = (
    "You are a medical translator. Translate the following text from "
    "{source} to {target}. Maintain medical terminology accuracy. "
    "Reply with the translation only."
)

_SIMPLIFY_SYSTEM = (
    "You are a medical translator who explains clinical documents to patients. "
    "Rewrite the following medical text in simple, plain language a patient can "
    "understand, keeping every clinically relevant fact. Also list the medical "
    "terms used in the original text with a short plain-language explanation of each.\n"
    "Reply with a single JSON object and nothing else, in this shape:\n"
    '{"simplified_text": "...", '
    '"medical_terms": [{"term": "...", "explanation": "..."}]}'
)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


class SimplificationPayload(BaseModel):
    """Expected reply for a medical → simple request."""

    simplified_text: str = Field(min_length=1)
    medical_terms: list[MedicalTerm] = Field(default_factory=list)


def is_simplification(source_language: str, target_language: str) -> bool:
    return (
        source_language.lower() == SIMPLIFY_SOURCE
        and target_language.lower() == SIMPLIFY_TARGET
    )


def build_system_prompt(source_language: str, target_language: str) -> str:
    """System instruction describing the task for this language pair."""
    if is_simplification(source_language, target_language):
        return _SIMPLIFY_SYSTEM
    return _TRANSLATE_SYSTEM.format(source=source_language, target=target_language)


def parse_simplification(content: str) -> SimplificationPayload:
    """Parse a simplification reply, tolerating a surrounding code fence.

    Raises:
        ValueError: If the reply is not a JSON object of the expected shape
            (pydantic.ValidationError is a ValueError).
    """
    text = content.strip()
    fenced = _CODE_FENCE.match(text)
    if fenced:
        text = fenced.group(1)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"reply is not valid JSON: {e}") from e
    payload = SimplificationPayload.model_validate(data)
    payload.medical_terms = unique_terms(payload.medical_terms)
    return payload
