"""
LLM Provider Implementations
The intent classifier is reached through a provider with a liveness probe and
a chat-completions call. The provider returns the raw reply payload; picking
the answer text out of it is the intent service's job.
"""
import httpx
import logging
from abc import ABC, abstractmethod
from llm_maps.core.exceptions import ClassifierOutputError, ClassifierUnavailable
from llm_maps.core.logger import logs

class BaseLLMProvider(ABC):
    """Base class for all LLM providers"""

    @abstractmethod
    async def is_available(self) -> bool:
        """Lightweight liveness check against the provider"""
        pass

    @abstractmethod
    async def generate(self, messages: list, temperature: float = 0.1, top_p: float = 0.9) -> dict:
        """Send a chat request and return the raw JSON payload"""
        pass

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return the name of the provider"""
        pass


class OpenWebUIProvider(BaseLLMProvider):
    """Open WebUI Provider (OpenAI-compatible chat completions)"""

    def __init__(
        self,
        base_url: str,
        model: str,
        api_key: str = "",
        timeout: float = 30.0,
        probe_timeout: float = 5.0
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.probe_timeout = probe_timeout
        self.headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json"
        }

    async def is_available(self) -> bool:
        async with httpx.AsyncClient() as client:
            try:
                response = await client.get(f"{self.base_url}/health", timeout=self.probe_timeout)
                response.raise_for_status()
                return True
            except httpx.HTTPError as e:
                logs.log(logging.WARNING, f"Open WebUI health check failed: {str(e)}")
                return False

    async def generate(self, messages: list, temperature: float = 0.1, top_p: float = 0.9) -> dict:
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
            "temperature": temperature,
            "top_p": top_p
        }

        async with httpx.AsyncClient() as client:
            try:
                response = await client.post(
                    f"{self.base_url}/api/chat/completions",
                    json=payload,
                    headers=self.headers,
                    timeout=self.timeout
                )
                response.raise_for_status()
            except httpx.ConnectError as e:
                logs.log(logging.ERROR, f"Cannot connect to Open WebUI at {self.base_url}: {str(e)}")
                raise ClassifierUnavailable(str(e)) from e
            except httpx.HTTPStatusError as e:
                logs.log(logging.ERROR, f"Open WebUI API error: {e.response.status_code} {e.response.text}")
                raise ClassifierUnavailable(str(e)) from e
            except httpx.HTTPError as e:
                logs.log(logging.ERROR, f"Open WebUI API error: {str(e)}")
                raise ClassifierUnavailable(str(e)) from e

        try:
            return response.json()
        except ValueError as e:
            raise ClassifierOutputError("Open WebUI returned a non-JSON body") from e

    def get_provider_name(self) -> str:
        return "Open WebUI"
