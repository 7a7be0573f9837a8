from abc import ABC, abstractmethod


class BaseProvider(ABC):
    """Abstract base class for the AI coaching backends."""

    @property
    @abstractmethod
    def name(self) -> str:
        """The name of this provider (e.g. 'gemini')."""
        ...

    @abstractmethod
    async def chat(
        self,
        messages: list[dict],
        model: str | None = None,
        image_base64: str | None = None,
        json_output: bool = False,
    ) -> dict:
        """
        Send a completion request.

        Args:
            messages: List of message dicts with 'role' and 'content' keys.
            model: Optional model identifier. Provider uses its default if None.
            image_base64: Optional JPEG attached to the last user message (meal photos).
            json_output: Ask the model for a JSON-only response.

        Returns:
            dict with keys:
                - text: str | None  - the generated text
                - provider: str     - provider name
                - model: str        - model used
                - status: "success" | "failed"
                - error: str | None - error message on failure
        """
        ...

    def _result(self, model: str, text: str | None = None, error: str | None = None) -> dict:
        return {
            "text": text,
            "provider": self.name,
            "model": model,
            "status": "failed" if error else "success",
            "error": error,
        }
