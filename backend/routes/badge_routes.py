from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from auth import get_current_user
from database import get_db
from services.badge_service import BadgeService

router = APIRouter(prefix="/api/v1/badges", tags=["Badges"])

# Read endpoints re-evaluate first: anniversary badges unlock with time alone.


@router.get("")
async def badge_gallery(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Every badge, earned ones first in the order they were unlocked."""
    BadgeService.sync(db, user_id)
    return BadgeService.gallery(db, user_id)

@router.get("/summary")
async def badge_summary(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Dashboard widget: one badge per category plus the first-time badges."""
    BadgeService.sync(db, user_id)
    return BadgeService.summary(db, user_id)

@router.post("/sync")
async def sync_badges(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    """Called by the client on app load."""
    return {"status": "success", "new_badges": BadgeService.sync(db, user_id)}

@router.get("/stats")
async def badge_stats(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    return BadgeService.stats(db, user_id)

@router.get("/celebrations/next")
async def next_celebration(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    BadgeService.sync(db, user_id)
    return BadgeService.next_celebration(db, user_id)

@router.post("/celebrations/dismiss")
async def dismiss_celebration(user_id: str = Depends(get_current_user), db: Session = Depends(get_db)):
    dismissed = BadgeService.dismiss_celebration(db, user_id)
    return {"status": "success", "dismissed": dismissed, "next": BadgeService.next_celebration(db, user_id)}
