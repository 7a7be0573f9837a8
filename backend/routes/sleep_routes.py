from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional

from auth import get_current_user
from database import get_db
from models.util import row_to_dict
from services.sleep_service import SleepService

router = APIRouter(prefix="/api/v1/sleep", tags=["Sleep"])


class SleepLogCreate(BaseModel):
    start_time: str  # "HH:MM"
    end_time: str
    quality: str
    timestamp: Optional[int] = None


@router.get("")
async def list_sleep(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return [row_to_dict(s) for s in SleepService.get_all(db, user_id)]

@router.post("")
async def log_sleep(body: SleepLogCreate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        result = SleepService.log(db, user_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if result is None:
        raise HTTPException(status_code=500, detail="Could not save sleep log")
    return {"status": "success", "data": row_to_dict(result["log"]), "new_badges": result["new_badges"]}

@router.delete("/{log_id}")
async def delete_sleep(log_id: int, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    if not SleepService.delete(db, user_id, log_id):
        raise HTTPException(status_code=404, detail="Log not found")
    return {"status": "success"}
