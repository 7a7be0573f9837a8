"""
coach_service.py - AI nutrition coach
Meal analysis (text or photo -> macro items), weekly or per-log-type insights
and the coaching chat, all delegated to an LLM provider. Failures degrade to
None or a fallback sentence.
"""

import json
import logging
from datetime import datetime, timedelta, timezone

from sqlalchemy.orm import Session

from badges.stats import completed_fasts, day_key
from config import GEMINI_API_KEYS, GEMINI_MODEL
from models.weight_log import WeightLog
from providers.base import BaseProvider
from providers.gemini_provider import GeminiProvider
from services.badge_service import BadgeService
from services.cache_service import ResponseCache
from services.profile_service import ProfileService

logger = logging.getLogger(__name__)

FOOD_PROMPT = (
    "Analyze the following food input (text description or image). "
    "Identify all food items visible or described. "
    "For each item, estimate its portion size (e.g., '1 cup', '150g', '1 medium apple') and its "
    "nutritional values: calories, protein (g), carbs (g), and fat (g).\n"
    "Return the result strictly in JSON format. The JSON object should have a single key \"items\", "
    "which is an array of objects with the properties \"name\" (string), \"portion\" (string), "
    "\"calories\", \"protein\", \"carbs\" and \"fat\" (numbers).\n\n"
    "User Description: \"{description}\""
)
INSIGHTS_FALLBACK = "Stay hydrated and keep logging your meals to keep your streak alive."
INSIGHTS_TTL = 86400
MACROS = ("calories", "protein", "carbs", "fat")

INSIGHT_INSTRUCTIONS = {
    "water": (
        "You are a hydration expert. Analyze the user's water intake. Be brief and encouraging "
        "and give 1 or 2 concrete tips. If intake is low, explain the risks. If it is good, congratulate them."
    ),
    "food": (
        "You are an expert nutritionist. Analyze the food journal summarized below. Comment on the "
        "calorie and macronutrient balance. Give 2 practical tips to improve the diet."
    ),
    "activity": (
        "You are a sports coach. Analyze the physical activity history. Assess regularity and "
        "intensity. Suggest something for the next session or for recovery."
    ),
    "fasting": (
        "You are an intermittent fasting specialist. Analyze the fasting habits. Check regularity "
        "and duration. Give one tip to handle hunger better or improve metabolic results."
    ),
    "sleep": (
        "You are a sleep specialist. Analyze the sleep habits. Comment on duration and regularity. "
        "Give one tip to improve rest quality or sleep hygiene."
    ),
    "weight": (
        "You are a physiology expert. Analyze the weight trend (loss, gain or plateau) kindly. "
        "Give one tip about body composition or metabolic patience."
    ),
}

COACH_INSTRUCTION = (
    "You are a caring personal health coach named OptiLife Coach. Your goal is to help the user "
    "reach their health goals (weight, hydration, sleep, exercise). You are motivating and "
    "empathetic, and you give practical, science-based advice. Keep answers concise and encouraging."
)
CHAT_FALLBACK = "Sorry, I'm having technical difficulties. Please try again."
# Client roles -> provider roles
CHAT_ROLES = {"user": "user", "model": "assistant", "assistant": "assistant"}


def parse_json(text: str | None):
    """Parse a model reply that may be wrapped in ```json fences. None if unparseable."""
    if not text:
        return None
    cleaned = text.replace("```json", "").replace("```", "").strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        logger.warning(f"Failed to parse AI JSON response: {cleaned[:200]}")
        return None


def _macro(value) -> float:
    try:
        return max(0.0, float(value))
    except (TypeError, ValueError):
        return 0.0


class CoachService:
    def __init__(self, providers: list[BaseProvider] | None = None, cache: ResponseCache | None = None):
        if providers is None:
            providers = [GeminiProvider(api_key=k, default_model=GEMINI_MODEL) for k in GEMINI_API_KEYS]
        self.providers = providers
        self.cache = cache or ResponseCache()

    async def _route(self, messages: list[dict], **kwargs) -> dict | None:
        """Try each configured provider/key in turn, return the first success."""
        for provider in self.providers:
            result = await provider.chat(messages, **kwargs)
            if result.get("status") == "success":
                return result
            logger.warning(f"Provider {provider.name} failed: {result.get('error')}")
        return None

    async def analyze_food(self, description: str, image_base64: str | None = None) -> list[dict] | None:
        prompt = FOOD_PROMPT.format(description=description or "")
        result = await self._route(
            [{"role": "user", "content": prompt}], image_base64=image_base64, json_output=True
        )
        data = parse_json(result.get("text") if result else None)
        if not isinstance(data, dict) or not isinstance(data.get("items"), list):
            return None

        items = []
        for item in data["items"]:
            if not isinstance(item, dict):
                continue
            items.append({
                "name": str(item.get("name") or "Food"),
                "portion": str(item.get("portion") or ""),
                **{m: _macro(item.get(m)) for m in MACROS},
            })
        return items

    @staticmethod
    def weekly_summary(db: Session, user_id: str, now: datetime | None = None) -> list[str]:
        """One line per day of the last 7 days that has any data."""
        now = now or datetime.now(timezone.utc)
        tz = BadgeService.tz
        logs = BadgeService.load_logs(db, user_id)

        lines = []
        for offset in range(6, -1, -1):
            key = (now.astimezone(tz).date() - timedelta(days=offset)).isoformat()

            def on_day(rows):
                return [r for r in rows if day_key(r.timestamp, tz) == key]

            water = sum(r.amount_ml for r in on_day(logs.water))
            calories = sum(r.calories or 0 for r in on_day(logs.food))
            active = sum(r.duration_minutes or 0 for r in on_day(logs.activity))
            sleep = sum(r.duration_minutes for r in on_day(logs.sleep))
            if water or calories or active or sleep:
                lines.append(
                    f"{key}: Water={water}ml, Calories={round(calories)}kcal, "
                    f"Activity={active}min, Sleep={sleep // 60}h{sleep % 60:02d}"
                )
        return lines

    @staticmethod
    def domain_summary(db: Session, user_id: str, kind: str, now: datetime | None = None) -> list[str]:
        """Recent data of one log type, one line per day or entry, with the matching goal."""
        if kind not in INSIGHT_INSTRUCTIONS:
            raise ValueError(f"Unknown insight type: {kind}")
        now = now or datetime.now(timezone.utc)
        tz = BadgeService.tz
        goals = ProfileService.get_goals(db, user_id)

        if kind == "weight":
            weights = db.query(WeightLog).filter_by(user_id=user_id)\
                        .order_by(WeightLog.timestamp.desc()).limit(5).all()
            if not weights:
                return []
            return [
                ", ".join(f"{w.weight_kg}kg" for w in reversed(weights)),
                f"Goal: {goals['weight_kg']}kg",
            ]

        logs = BadgeService.load_logs(db, user_id)
        if kind == "fasting":
            fasts = sorted(completed_fasts(logs.fasting), key=lambda f: f.end_time)[-7:]
            return [
                f"{day_key(f.end_time, tz)}: {(f.end_time - f.start_time) / 3600000:.1f}h "
                f"(goal {f.goal_hours or goals['fasting_hours']}h)"
                for f in fasts
            ]
        if kind == "activity":
            recent = sorted(logs.activity, key=lambda a: a.timestamp)[-10:]
            return [
                f"{day_key(a.timestamp, tz)}: {a.activity_name} {a.duration_minutes}min, "
                f"{round(a.calories_burned or 0)}kcal"
                for a in recent
            ]

        lines = []
        for offset in range(6, -1, -1):
            key = (now.astimezone(tz).date() - timedelta(days=offset)).isoformat()
            if kind == "water":
                rows = [r for r in logs.water if day_key(r.timestamp, tz) == key]
                if rows:
                    lines.append(f"{key}: {sum(r.amount_ml for r in rows)}ml (goal {goals['water_ml']}ml)")
            elif kind == "food":
                rows = [r for r in logs.food if day_key(r.timestamp, tz) == key]
                if rows:
                    totals = {m: round(sum(getattr(r, m) or 0 for r in rows)) for m in MACROS}
                    lines.append(
                        f"{key}: {totals['calories']}kcal, protein {totals['protein']}g, "
                        f"carbs {totals['carbs']}g, fat {totals['fat']}g (goal {goals['calories']}kcal)"
                    )
            elif kind == "sleep":
                for r in (r for r in logs.sleep if day_key(r.timestamp, tz) == key):
                    lines.append(
                        f"{key}: {r.duration_minutes // 60}h{r.duration_minutes % 60:02d} ({r.quality}, "
                        f"goal {goals['sleep_hours']}h)"
                    )
        return lines

    async def _cached_reply(self, user_id: str, messages: list[dict]) -> str | None:
        key = "\n".join(m["content"] for m in messages)
        self.cache.clear_expired()
        cached = self.cache.get(user_id, key, GEMINI_MODEL)
        if cached is not None:
            return cached["text"]

        result = await self._route(messages)
        if not result or not result.get("text"):
            return None
        self.cache.set(user_id, key, GEMINI_MODEL, result, INSIGHTS_TTL)
        return result["text"]

    async def insights(
        self, db: Session, user_id: str, kind: str | None = None, now: datetime | None = None
    ) -> str:
        """Weekly overview, or advice about one log type when kind is given."""
        if kind is None:
            lines = self.weekly_summary(db, user_id, now)
            if not lines:
                return INSIGHTS_FALLBACK
            stats = BadgeService.stats(db, user_id, now)
            messages = [{"role": "user", "content": (
                "Based on my recent wellness logs, write 2 concise, supportive pieces of advice "
                f"or point out a trend. Current logging streak: {stats['current_streak']} days.\n"
                + "\n".join(lines)
            )}]
        else:
            lines = self.domain_summary(db, user_id, kind, now)
            if not lines:
                return INSIGHTS_FALLBACK
            messages = [
                {"role": "system", "content": INSIGHT_INSTRUCTIONS[kind]},
                {"role": "user", "content": (
                    "Here is my recent data:\n" + "\n".join(lines)
                    + "\n\nAnalyze it and give me short, impactful advice."
                )},
            ]
        return await self._cached_reply(user_id, messages) or INSIGHTS_FALLBACK

    async def chat(self, message: str, history: list[dict] | None = None) -> str:
        """One turn of the coaching conversation. history items are {role, text}."""
        if not message or not message.strip():
            raise ValueError("message must not be empty")

        messages = [{"role": "system", "content": COACH_INSTRUCTION}]
        for turn in history or []:
            role = CHAT_ROLES.get(turn.get("role"))
            text = turn.get("text")
            if role and text:
                messages.append({"role": role, "content": text})
        messages.append({"role": "user", "content": message})

        result = await self._route(messages)
        if not result or not result.get("text"):
            return CHAT_FALLBACK
        return result["text"]


_coach: CoachService | None = None


def get_coach() -> CoachService:
    """FastAPI dependency - shared CoachService built from configured keys."""
    global _coach
    if _coach is None:
        _coach = CoachService()
    return _coach
