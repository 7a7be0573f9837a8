import asyncio
import base64
import logging

from providers.base import BaseProvider

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-1.5-flash"

TIMEOUT_SECONDS = 30.0


class GeminiProvider(BaseProvider):
    """Provider for Google Gemini API using the official SDK."""

    def __init__(self, api_key: str, default_model: str | None = None):
        self.api_key = api_key
        self.default_model = default_model or DEFAULT_MODEL

    @property
    def name(self) -> str:
        return "gemini"

    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        image_base64: str | None = None,
        json_output: bool = False,
    ) -> dict:
        used_model = model or self.default_model
        try:
            import google.generativeai as genai
            # genai is configured module-wide, so set the key right before each call
            genai.configure(api_key=self.api_key)

            system_instruction = None
            history = []
            for msg in messages:
                if msg["role"] == "system":
                    system_instruction = msg["content"]
                elif msg["role"] == "user":
                    history.append({"role": "user", "parts": [msg["content"]]})
                elif msg["role"] == "assistant":
                    history.append({"role": "model", "parts": [msg["content"]]})

            parts = []
            if history and history[-1]["role"] == "user":
                parts = list(history[-1]["parts"])
                history = history[:-1]
            if image_base64:
                parts.insert(0, {"mime_type": "image/jpeg", "data": base64.b64decode(image_base64)})

            generation_config = {"response_mime_type": "application/json"} if json_output else None
            g_model = genai.GenerativeModel(
                model_name=used_model,
                system_instruction=system_instruction,
                generation_config=generation_config,
            )
            chat_session = g_model.start_chat(history=history)

            response = await asyncio.wait_for(
                chat_session.send_message_async(content=parts), timeout=TIMEOUT_SECONDS
            )
            return self._result(used_model, text=response.text)
        except asyncio.TimeoutError:
            return self._result(used_model, error="Timeout")
        except Exception as e:
            logger.error(f"Gemini request failed: {e}")
            return self._result(used_model, error=str(e))
