import json
import logging
from collections.abc import Sequence

from pydantic import ValidationError

from tabsplit.core.errors import CommandError
from tabsplit.schemas.assignment import Assignment
from tabsplit.schemas.command import CommandResult
from tabsplit.schemas.receipt import ReceiptItem
from tabsplit.utils.llm_utils import parse_llm_json
from tabsplit.workers.ocr import get_gemini_model

logger = logging.getLogger(__name__)


COMMAND_PROMPT = """Current Items: {items}
Current People: {people}
Current Assignments: {assignments}

User Command: "{message}"

Instructions:
1. Identify which items the user is talking about. Match item names loosely, but reply with the item name exactly as listed.
2. Identify which people are being assigned to those items.
3. If a new person is mentioned, add them to "newPeople".
4. Return a list of assignment updates.

Return ONLY valid JSON in this structure:
{{
  "assignments": [
    {{"itemName": "string", "people": ["string"], "action": "add | remove | set"}}
  ],
  "newPeople": ["string"],
  "response": "a friendly confirmation of what was updated"
}}
"""


def build_command_prompt(
    message: str,
    items: Sequence[ReceiptItem],
    people: Sequence[str],
    assignments: Sequence[Assignment],
) -> str:
    return COMMAND_PROMPT.format(
        items=json.dumps([item.model_dump(by_alias=True) for item in items], ensure_ascii=False),
        people=json.dumps(list(people), ensure_ascii=False),
        assignments=json.dumps([a.model_dump(by_alias=True) for a in assignments], ensure_ascii=False),
        message=message,
    )


async def process_chat_command(
    message: str,
    items: Sequence[ReceiptItem],
    people: Sequence[str],
    assignments: Sequence[Assignment],
) -> CommandResult:
    """Ask Gemini to turn a free-text instruction into assignment updates."""
    model = get_gemini_model()
    prompt = build_command_prompt(message, items, people, assignments)

    try:
        response = await model.generate_content_async(
            prompt,
            generation_config={"response_mime_type": "application/json"},
        )
        raw_text = response.text
    except Exception as e:
        logger.exception("Command interpretation request failed")
        raise CommandError(f"Command service error: {e}") from e

    try:
        result = CommandResult.model_validate(parse_llm_json(raw_text))
    except (ValueError, ValidationError) as e:
        logger.error(f"Command service returned unusable output: {(raw_text or '')[:200]!r}")
        raise CommandError("Command service returned malformed output") from e

    logger.info(f"Interpreted command into {len(result.assignments)} update(s)")
    return result
