import logging
import time

import google.generativeai as genai

from tabsplit.core.config import settings
from tabsplit.core.errors import ExtractionError
from tabsplit.schemas.receipt import Receipt, receipt_from_payload
from tabsplit.utils.llm_utils import parse_llm_json

logger = logging.getLogger(__name__)


EXTRACTION_PROMPT = """Parse this receipt into this exact JSON structure:

{
  "restaurantName": "string",
  "date": "human-readable date, e.g. March 15, 2024",
  "items": [
    {"name": "item name", "price": 0.00}
  ],
  "tax": 0.00,
  "tip": 0.00,
  "total": 0.00,
  "currency": "3-letter code or symbol",
  "itemsIncludeTax": false
}

Rules:
- Return ONLY valid JSON, no markdown or explanation.
- Omit restaurantName and date if they are not on the receipt.
- Determine whether the line item prices already include tax and set itemsIncludeTax accordingly.
- If tax is included in item prices, still put the tax amount shown in "tax" and make "total" the actual final amount on the bill.
- If tax is listed separately and NOT included in item prices, "total" is the sum of items + tax + tip.
- If a tip is not explicitly listed, set "tip" to 0.
"""


def get_gemini_model() -> "genai.GenerativeModel":
    genai.configure(api_key=settings.llm_api_key)
    return genai.GenerativeModel(settings.llm_model_name)


async def parse_receipt_image(image_data: bytes, mime_type: str) -> Receipt:
    """
    Send a receipt image to Gemini and coerce the reply into a Receipt.

    Raises ExtractionError on any service or payload failure so the caller can
    keep its previous receipt untouched.
    """
    if not image_data:
        raise ExtractionError("No image data to scan")

    model = get_gemini_model()
    start_time = time.perf_counter()
    logger.info(f"Starting extraction with model {settings.llm_model_name} ({len(image_data)} bytes, {mime_type})")

    try:
        response = await model.generate_content_async(
            [{"mime_type": mime_type, "data": image_data}, EXTRACTION_PROMPT],
            generation_config={"response_mime_type": "application/json"},
        )
        raw_text = response.text
    except Exception as e:
        logger.exception("Receipt extraction request failed")
        raise ExtractionError(f"Extraction service error: {e}") from e

    try:
        data = parse_llm_json(raw_text)
    except ValueError as e:
        logger.error(f"Extraction returned non-JSON output: {(raw_text or '')[:200]!r}")
        raise ExtractionError("Extraction service returned malformed JSON") from e

    receipt = receipt_from_payload(data)
    logger.info(
        f"Extracted {len(receipt.items)} items in {time.perf_counter() - start_time:.2f}s"
    )
    return receipt
