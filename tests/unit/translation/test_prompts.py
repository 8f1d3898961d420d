# tests/unit/translation/test_prompts.py — v1
"""Tests for translation/prompts.py."""

from __future__ import annotations

import pytest

from medtranslate.translation.prompts import (
    build_system_prompt,
    is_simplification,
    parse_simplification,
)


class TestSystemPrompt:
    def test_translation_prompt_names_languages(self):
        prompt = build_system_prompt("English", "Spanish")
        assert "from English to Spanish" in prompt
        assert "medical terminology" in prompt

    def test_simplification_prompt_asks_for_json(self):
        prompt = build_system_prompt("medical", "simple")
        assert "simplified_text" in prompt
        assert "medical_terms" in prompt

    def test_is_simplification_case_insensitive(self):
        assert is_simplification("Medical", "SIMPLE")
        assert not is_simplification("medical", "fr")


class TestParseSimplification:
    def test_plain_json(self):
        payload = parse_simplification(
            '{"simplified_text": "High blood pressure.", '
            '"medical_terms": [{"term": "Hypertension", "explanation": "high blood pressure"}]}'
        )
        assert payload.simplified_text == "High blood pressure."
        assert payload.medical_terms[0].term == "Hypertension"

    def test_code_fenced_json(self):
        payload = parse_simplification(
            '```json\n{"simplified_text": "Rest.", "medical_terms": []}\n```'
        )
        assert payload.simplified_text == "Rest."
        assert payload.medical_terms == []

    def test_terms_optional(self):
        assert parse_simplification('{"simplified_text": "ok"}').medical_terms == []

    def test_duplicate_terms_dropped(self):
        payload = parse_simplification(
            '{"simplified_text": "x", "medical_terms": ['
            '{"term": "Edema", "explanation": "swelling"}, {"term": "edema"}]}'
        )
        assert [t.term for t in payload.medical_terms] == ["Edema"]

    @pytest.mark.parametrize(
        "content",
        [
            "not json at all",
            "[1, 2, 3]",
            '{"medical_terms": []}',
            '{"simplified_text": ""}',
            '{"simplified_text": "x", "medical_terms": "nope"}',
        ],
    )
    def test_malformed_raises_value_error(self, content):
        with pytest.raises(ValueError):
            parse_simplification(content)
