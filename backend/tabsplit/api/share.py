from fastapi import APIRouter, Query

from tabsplit.schemas.breakdown import SharedView
from tabsplit.utils.share_codec import SHARE_PARAM, try_decode_share

router = APIRouter(tags=["share"])


@router.get("/api/share", response_model=SharedView)
async def resolve_share(share: str | None = Query(default=None, alias=SHARE_PARAM)):
    """A decodable token switches the client to read-only shared mode."""
    data = try_decode_share(share)
    if data is None:
        return SharedView(mode="editing")
    return SharedView(mode="shared", receipt=data, tip_percentage=data.tip_percentage)
