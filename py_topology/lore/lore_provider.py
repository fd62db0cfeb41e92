"""
Flavor text for generated terrains from an external text generation service.

Only the terrain's dimensions are sent, never its contents. Every failure
(no API key, network trouble, bad response) comes back as a fixed fallback
sentence, so callers never see an exception from here.
"""

from typing import Any, Dict, Optional

import httpx
import structlog

from ..config import settings
from ..core.terrain_generator import GenerationResult

logger = structlog.get_logger()

NO_KEY_MESSAGE = "AI lore generation is unavailable without an API key."
FAILURE_MESSAGE = "Failed to generate AI lore. The maze stands silent."
EMPTY_MESSAGE = "No lore generated."

PROMPT_TEMPLATE = (
    "You are a creative dungeon master. I have generated a maze that is "
    "{width} units wide and {height} units tall. Please provide a creative "
    "name for this location, a brief atmospheric description, and three "
    "potential 'encounter' hooks for a game. Format the response in Markdown."
)


def build_prompt(width: int, height: int) -> str:
    return PROMPT_TEMPLATE.format(width=width, height=height)


def extract_text(payload: Dict[str, Any]) -> str:
    """
    Pull generated text out of a generateContent response body.

    Raises KeyError/IndexError/TypeError when the body is not shaped like one.
    """
    candidates = payload["candidates"]
    if not candidates:
        return ""
    parts = candidates[0]["content"]["parts"]
    return "".join(part.get("text", "") for part in parts)


class LoreProvider:
    """
    Async client for the lore endpoint.

    Args:
        api_key: Service credential; falls back to settings.lore_api_key
        model: Model name; falls back to settings.lore_model
        endpoint: Base URL; falls back to settings.lore_endpoint
        client: Optional shared httpx.AsyncClient (tests inject one with a
            MockTransport). A private client is opened per request otherwise.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        endpoint: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
    ):
        self.api_key = api_key if api_key is not None else settings.lore_api_key
        self.model = model or settings.lore_model
        self.endpoint = (endpoint or settings.lore_endpoint).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.lore_timeout_seconds
        self._client = client

    @property
    def url(self) -> str:
        return f"{self.endpoint}/models/{self.model}:generateContent"

    def _request_body(self, width: int, height: int) -> Dict[str, Any]:
        return {
            "contents": [{"parts": [{"text": build_prompt(width, height)}]}],
            "generationConfig": {
                "temperature": settings.lore_temperature,
                "topP": settings.lore_top_p,
            },
        }

    async def _post(self, client: httpx.AsyncClient, body: Dict[str, Any]) -> Dict[str, Any]:
        response = await client.post(
            self.url,
            json=body,
            headers={"x-goog-api-key": self.api_key},
            timeout=self.timeout,
        )
        response.raise_for_status()
        return response.json()

    async def request_lore(self, width: int, height: int) -> str:
        """
        Ask the service to describe a width x height terrain.

        Returns:
            Markdown-flavored text, or one of the fallback sentences
        """
        if not self.api_key:
            return NO_KEY_MESSAGE

        body = self._request_body(width, height)
        logger.info("Requesting terrain lore", width=width, height=height, model=self.model)

        try:
            if self._client is not None:
                payload = await self._post(self._client, body)
            else:
                async with httpx.AsyncClient() as client:
                    payload = await self._post(client, body)
            text = extract_text(payload)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.error("Lore request failed", error=str(e), width=width, height=height)
            return FAILURE_MESSAGE
        except (KeyError, IndexError, TypeError, AttributeError, ValueError) as e:
            logger.error("Malformed lore response", error=repr(e), width=width, height=height)
            return FAILURE_MESSAGE
        except Exception as e:
            logger.error("Lore request crashed", error=repr(e), width=width, height=height)
            return FAILURE_MESSAGE

        return text or EMPTY_MESSAGE

    async def request_lore_for(self, result: GenerationResult) -> str:
        """Lore for a generated terrain; only its dimensions are used."""
        return await self.request_lore(result.width, result.height)
