from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional

from auth import get_current_user
from database import get_db
from models.util import row_to_dict
from services.tracker_service import TrackerService


class WaterLogCreate(BaseModel):
    amount_ml: int
    timestamp: Optional[int] = None

class FoodLogCreate(BaseModel):
    name: str
    portion: Optional[str] = None
    calories: Optional[float] = 0
    protein: Optional[float] = 0
    carbs: Optional[float] = 0
    fat: Optional[float] = 0
    timestamp: Optional[int] = None

class FoodBatchCreate(BaseModel):
    items: list[FoodLogCreate]

class ActivityLogCreate(BaseModel):
    activity_name: str
    duration_minutes: int = 0
    calories_burned: Optional[float] = 0
    steps: Optional[int] = None
    timestamp: Optional[int] = None

class WeightLogCreate(BaseModel):
    weight_kg: float
    timestamp: Optional[int] = None


def _saved(result: dict | None) -> dict:
    if result is None:
        raise HTTPException(status_code=500, detail="Could not save log")
    return {"status": "success", "data": row_to_dict(result["log"]), "new_badges": result["new_badges"]}


def make_router(kind: str, schema: type[BaseModel], tag: str) -> APIRouter:
    """List/add/delete routes for one log table."""
    router = APIRouter(prefix=f"/api/v1/{kind}", tags=[tag])

    @router.get("")
    async def list_logs(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
        return [row_to_dict(r) for r in TrackerService.get_all(db, user_id, kind)]

    @router.post("")
    async def add_log(body: schema, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
        try:
            result = TrackerService.add(db, user_id, kind, body.model_dump(exclude_unset=True))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        return _saved(result)

    @router.delete("/{log_id}")
    async def delete_log(log_id: int, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
        if not TrackerService.delete(db, user_id, kind, log_id):
            raise HTTPException(status_code=404, detail="Log not found")
        return {"status": "success"}

    return router


water_router = make_router("water", WaterLogCreate, "Water")
food_router = make_router("food", FoodLogCreate, "Food")
activity_router = make_router("activity", ActivityLogCreate, "Activity")
weight_router = make_router("weight", WeightLogCreate, "Weight")


@food_router.post("/batch")
async def add_food_batch(body: FoodBatchCreate, user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Save every item of an analyzed meal at once."""
    try:
        result = TrackerService.add_many(db, user_id, "food", [i.model_dump(exclude_unset=True) for i in body.items])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if result is None:
        raise HTTPException(status_code=500, detail="Could not save meal")
    return {
        "status": "success",
        "data": [row_to_dict(r) for r in result["logs"]],
        "new_badges": result["new_badges"],
    }
