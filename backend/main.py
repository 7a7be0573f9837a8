import os
import sys
import logging

# Ensure this directory is in the path for Vercel and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import APP_NAME
from database import init_db
from routes.badge_routes import router as badge_router
from routes.coach_routes import router as coach_router
from routes.fasting_routes import router as fasting_router
from routes.profile_routes import router as profile_router
from routes.sleep_routes import router as sleep_router
from routes.tracker_routes import water_router, food_router, activity_router, weight_router

logger = logging.getLogger(__name__)

# Initialize db configuration
try:
    init_db()
except Exception as e:
    logger.warning(f"Database init skipped or failed: {e}")

app = FastAPI(title=f"{APP_NAME} API")

@app.get("/api/v1/health-check")
async def health():
    return {"status": "ok", "message": "Backend is alive!"}

# Configure CORS for the web/mobile front-end
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for router in (
    water_router, food_router, activity_router, weight_router,
    fasting_router, sleep_router, profile_router, badge_router, coach_router,
):
    app.include_router(router)

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
