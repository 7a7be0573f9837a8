from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional

from auth import get_current_user
from database import get_db
from services.profile_service import ProfileService

router = APIRouter(prefix="/api/v1/profile", tags=["Profile"])


class ProfileUpdate(BaseModel):
    age: Optional[int] = None
    weight_kg: Optional[float] = None
    height_cm: Optional[float] = None
    gender: Optional[str] = None  # male/female/other

class GoalsUpdate(BaseModel):
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fat: Optional[float] = None
    water_ml: Optional[int] = None
    activity_minutes: Optional[int] = None
    fasting_hours: Optional[float] = None
    sleep_hours: Optional[float] = None
    weight_kg: Optional[float] = None


@router.get("")
async def get_profile(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return ProfileService.get_profile(db, user_id)

@router.put("")
async def update_profile(body: ProfileUpdate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        profile = ProfileService.update_profile(db, user_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if profile is None:
        raise HTTPException(status_code=500, detail="Could not update profile")
    return {"status": "success", "data": profile}

@router.get("/goals")
async def get_goals(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return ProfileService.get_goals(db, user_id)

@router.put("/goals")
async def update_goals(body: GoalsUpdate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        goals = ProfileService.update_goals(db, user_id, body.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if goals is None:
        raise HTTPException(status_code=500, detail="Could not update goals")
    return {"status": "success", "data": goals}
