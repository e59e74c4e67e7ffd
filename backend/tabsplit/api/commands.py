from fastapi import APIRouter, HTTPException

from tabsplit.core.errors import CommandError
from tabsplit.schemas.command import CommandRequest, CommandResult
from tabsplit.workers.commands import process_chat_command

router = APIRouter(tags=["commands"])


@router.post("/api/commands", response_model=CommandResult)
async def interpret_command(body: CommandRequest):
    try:
        return await process_chat_command(body.message, body.items, body.people, body.assignments)
    except CommandError as e:
        raise HTTPException(status_code=502, detail=str(e))
