from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import NaiveDatetime
from sqlmodel import Session

from reservations.database import get_session
from reservations.models.availability import BusyBlock
from reservations.services.availability import get_busy_blocks


router = APIRouter(prefix="/availability", tags=["availability"])


# GET /availability/1/busy-blocks?start=2026-02-09T00:00:00&end=2026-02-16T00:00:00
@router.get("/{business_id}/busy-blocks", response_model=List[BusyBlock])
def list_busy_blocks(
    business_id: int,
    start: NaiveDatetime = Query(...),
    end: NaiveDatetime = Query(...),
    session: Session = Depends(get_session),
):
    if end <= start:
        raise HTTPException(status_code=400, detail="end must be after start")

    return get_busy_blocks(session, business_id, start, end)
