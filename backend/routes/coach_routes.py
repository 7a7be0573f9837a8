from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session
from typing import Optional, List

from auth import get_current_user
from database import get_db
from services.coach_service import CoachService, get_coach

router = APIRouter(prefix="/api/v1/coach", tags=["Coach"])


class FoodAnalysisRequest(BaseModel):
    description: str = ""
    image_base64: Optional[str] = None  # JPEG

class ChatTurn(BaseModel):
    role: str  # user or model
    text: str

class ChatRequest(BaseModel):
    message: str
    history: List[ChatTurn] = []


@router.post("/analyze-food")
async def analyze_food(
    body: FoodAnalysisRequest,
    user_id: str = Depends(get_current_user),
    coach: CoachService = Depends(get_coach),
):
    if not body.description and not body.image_base64:
        raise HTTPException(status_code=400, detail="Provide a description or a photo")
    items = await coach.analyze_food(body.description, body.image_base64)
    if items is None:
        raise HTTPException(status_code=502, detail="AI analysis unavailable")
    return {"items": items}

@router.get("/insights")
async def coach_insights(
    kind: Optional[str] = Query(None, alias="type"),
    user_id: str = Depends(get_current_user),
    db: Session = Depends(get_db),
    coach: CoachService = Depends(get_coach),
):
    """Weekly overview, or advice about one log type (water, food, activity, fasting, sleep, weight)."""
    try:
        return {"text": await coach.insights(db, user_id, kind)}
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

@router.post("/chat")
async def coach_chat(
    body: ChatRequest,
    user_id: str = Depends(get_current_user),
    coach: CoachService = Depends(get_coach),
):
    try:
        reply = await coach.chat(body.message, [t.model_dump() for t in body.history])
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"reply": reply}
