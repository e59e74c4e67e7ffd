import json
from typing import Any


def parse_llm_json(raw_text: str | None) -> Any:
    """Parse a model's JSON reply, removing markdown code fences if present.

    Raises ValueError when the text is empty or not JSON.
    """
    if not raw_text:
        raise ValueError("Empty response from model")
    if "```json" in raw_text:
        raw_text = raw_text.split("```json")[1].split("```")[0].strip()
    elif "```" in raw_text:
        raw_text = raw_text.split("```")[1].split("```")[0].strip()
    return json.loads(raw_text)
