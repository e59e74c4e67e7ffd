from fastapi import APIRouter, HTTPException

from tabsplit.core.errors import ExtractionError
from tabsplit.schemas.receipt import Receipt
from tabsplit.schemas.scan import ScanRequest
from tabsplit.workers.ocr import parse_receipt_image

router = APIRouter(tags=["receipts"])


@router.post("/api/receipts/scan", response_model=Receipt)
async def scan_receipt(body: ScanRequest):
    """Extract a receipt from an image. The split itself is computed client-side."""
    try:
        image_data = body.image_bytes()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        return await parse_receipt_image(image_data, body.mime_type)
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=str(e))
