"""Helpers for turning generative model text into JSON."""

import json
import re
from typing import Any

_CODE_FENCE = re.compile(r"```(?:json)?", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    """Remove markdown code-fence markers (```json and ```) and surrounding whitespace."""
    return _CODE_FENCE.sub("", text).strip()


def parse_model_json(text: str) -> Any:
    """Parse a model response as JSON after stripping code fences.

    Raises:
        json.JSONDecodeError: If the cleaned text is not valid JSON.
    """
    return json.loads(strip_code_fences(text))
