from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional

from auth import get_current_user
from database import get_db
from models.util import row_to_dict
from services.fasting_service import FastingService

router = APIRouter(prefix="/api/v1/fasting", tags=["Fasting"])


class FastStart(BaseModel):
    goal_hours: float = 16
    start_time: Optional[int] = None

class FastEnd(BaseModel):
    end_time: Optional[int] = None

class FastCreate(BaseModel):
    start_time: int
    end_time: int
    goal_hours: Optional[float] = 16


def _saved(result: dict | None) -> dict:
    if result is None:
        raise HTTPException(status_code=500, detail="Could not save fast")
    return {"status": "success", "data": row_to_dict(result["log"]), "new_badges": result["new_badges"]}


@router.get("")
async def list_fasts(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return [row_to_dict(f) for f in FastingService.get_all(db, user_id)]

@router.post("")
async def add_fast(body: FastCreate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return _saved(FastingService.add_completed(db, user_id, body.model_dump()))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.get("/active")
async def get_active_fast(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    fast = FastingService.get_active(db, user_id)
    return row_to_dict(fast) if fast else None

@router.post("/start")
async def start_fast(body: FastStart, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        return _saved(FastingService.start(db, user_id, body.goal_hours, body.start_time))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/end")
async def end_fast(body: Optional[FastEnd] = None, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    if FastingService.get_active(db, user_id) is None:
        raise HTTPException(status_code=404, detail="No active fast")
    return _saved(FastingService.end(db, user_id, body.end_time if body else None))

@router.delete("/{log_id}")
async def delete_fast(log_id: int, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    if not FastingService.delete(db, user_id, log_id):
        raise HTTPException(status_code=404, detail="Fast not found")
    return {"status": "success"}
