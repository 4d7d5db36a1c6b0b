"""
Insight Service - LLM-Generated Motivational Note
==================================================

ARCHITECTURAL DECISION:
- Uses OpenRouter API (OpenAI-compatible chat completions)
- Falls back to a fixed message on any failure
- The note is best effort: the check-in is already saved before this runs

EXTENSIBILITY:
- To use different model: change INSIGHT_MODEL
- To use OpenAI directly: change OPENROUTER_API_URL and key
"""

import logging
import requests
from typing import Optional

from ..config import Settings, get_settings

logger = logging.getLogger(__name__)


class InsightService:
    """
    Motivational insight generator.

    USAGE:
        service = InsightService()
        text = service.request_insight(80, 1, 4, "Buen sprint")

    FALLBACK BEHAVIOR:
    - If no API key: fallback message
    - If API fails or times out: fallback message
    - If response is empty or malformed: fallback message
    """

    FALLBACK_TEMPLATE = (
        "¡Buen trabajo completando tu revisión mensual! "
        "Desde {organization} vamos a estar acompañándote para que sigas creciendo."
    )

    PROMPT_TEMPLATE = (
        "Eres un mentor de ingeniería experimentado. Un desarrollador ha reportado "
        "lo siguiente para este mes en {organization}:\n"
        "- Completitud de tareas: {completion}%\n"
        "- Cantidad de bugs: {bugs}\n"
        "- Nivel de satisfacción (1-5): {satisfaction}\n"
        "{comments_line}"
        "\n"
        "Regla importante: Si los bugs son mayores a 2, considera que la calidad del "
        "desarrollo es \"moderada\" o \"preocupante\" y ofrece consejos técnicos específicos.\n"
        "\n"
        "IMPORTANTE: No te propongas tú mismo como ayuda directa (ej. \"yo te ayudo\"). "
        "En su lugar, indica que \"Desde {organization} vamos a estar acompañándote\" o "
        "\"En {organization} estamos para apoyarte en lo que necesites\".\n"
        "\n"
        "Escribe una respuesta corta (máximo 3 frases) motivadora y profesional. "
        "Si la satisfacción es baja, sé empático. Si todo es positivo y los bugs son 0-2, "
        "celebra su éxito. Responde en Español."
    )

    def __init__(self, settings: Optional[Settings] = None):
        """Initialize insight service with settings."""
        settings = settings or get_settings()
        self._api_key = settings.llm.api_key
        self._api_url = settings.llm.api_url
        self._model = settings.llm.model
        self._temperature = settings.llm.temperature
        self._max_tokens = settings.llm.max_tokens
        self._timeout = settings.llm.timeout_seconds
        self._organization = settings.checkin.organization_name

        if not self._api_key:
            logger.warning(
                "No OPENROUTER_API_KEY set. "
                "Insights will use the fallback message."
            )

    @property
    def fallback_message(self) -> str:
        return self.FALLBACK_TEMPLATE.format(organization=self._organization)

    def build_prompt(
        self,
        completion_percent: int,
        bug_count: int,
        satisfaction: int,
        comments: Optional[str] = None
    ) -> str:
        comments_line = f"- Comentarios adicionales del dev: \"{comments}\"\n" if comments else ""
        return self.PROMPT_TEMPLATE.format(
            organization=self._organization,
            completion=completion_percent,
            bugs=bug_count,
            satisfaction=satisfaction,
            comments_line=comments_line,
        )

    def request_insight(
        self,
        completion_percent: int,
        bug_count: int,
        satisfaction: int,
        comments: Optional[str] = None
    ) -> str:
        """
        Generate a short motivational note for a submitted check-in.

        Args:
            completion_percent: Task completion, 0-100.
            bug_count: Bugs reported this month.
            satisfaction: Satisfaction level, 1-5.
            comments: Optional free text from the developer.

        Returns:
            The generated note, or the fallback message.
        """
        if not self._api_key:
            return self.fallback_message

        prompt = self.build_prompt(completion_percent, bug_count, satisfaction, comments)
        content = self._generate(prompt)
        if not content or not content.strip():
            return self.fallback_message
        return content

    def _generate(self, prompt: str) -> Optional[str]:
        """
        Call the chat completions API.

        Returns:
            Generated text or None if the call fails.
        """
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://github.com/devpulse-checkin",  # Required by OpenRouter
        }

        payload = {
            "model": self._model,
            "messages": [
                {
                    "role": "user",
                    "content": prompt
                }
            ],
            "temperature": self._temperature,
            "max_tokens": self._max_tokens,
        }

        try:
            response = requests.post(
                self._api_url,
                headers=headers,
                json=payload,
                timeout=self._timeout
            )
            response.raise_for_status()

            return self._extract_response_content(response.json())

        except requests.Timeout:
            logger.warning("LLM API timeout, using fallback insight")
            return None

        except requests.RequestException as e:
            logger.warning(f"LLM API error: {e}, using fallback insight")
            return None

        except ValueError as e:
            logger.warning(f"LLM API returned invalid JSON: {e}, using fallback insight")
            return None

    def _extract_response_content(self, data: dict) -> str:
        """Extract text content from API response."""
        try:
            choices = data.get("choices", [])
            if choices:
                message = choices[0].get("message", {})
                return message.get("content") or ""
        except (AttributeError, KeyError, IndexError, TypeError):
            pass
        return ""
