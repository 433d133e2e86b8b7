"""Chat completions client for prompt generation."""

import httpx
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception_type

import config
from src.models import GenerationConfig


class GenerationError(Exception):
    """Raised when the generation API call fails."""

    pass


class GenerationTimeoutError(GenerationError):
    """Raised when the generation API call times out."""

    pass


class GenerationEmptyResponse(GenerationError):
    """Raised when the generation API returns no textual content."""

    pass


def extract_message_content(data: dict) -> str | None:
    """
    Pull the assistant message text out of a chat completions response.

    Returns None when the response carries no content at all.
    """
    choices = data.get("choices") if isinstance(data, dict) else None
    if not choices:
        return None
    message = choices[0].get("message") or {}
    content = message.get("content")
    if isinstance(content, list):
        # Content parts form: [{"type": "text", "text": "..."}]
        content = "".join(
            part.get("text", "") for part in content if isinstance(part, dict)
        )
    return content


class GenerationClient:
    """OpenAI-compatible chat completions client."""

    def __init__(
        self,
        api_key: str = config.OPENAI_API_KEY,
        base_url: str = config.OPENAI_BASE_URL,
        timeout: float = config.GENERATION_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client()
        self._headers = {"Authorization": f"Bearer {api_key}"}

    @retry(
        stop=stop_after_attempt(config.GENERATION_MAX_ATTEMPTS),
        wait=wait_exponential(multiplier=2, min=5, max=60),
        retry=retry_if_exception_type((GenerationTimeoutError,)),
        reraise=True,
    )
    def generate(
        self,
        system_instruction: str,
        user_message: str,
        generation_config: GenerationConfig,
    ) -> str | None:
        """
        Send one system directive and one user message.

        Args:
            system_instruction: Fixed directive describing the desired output
            user_message: The user turn
            generation_config: Model and sampling settings

        Returns:
            Raw response text, or None if the response has no content

        Raises:
            GenerationTimeoutError: If the request times out
            GenerationError: On transport, HTTP or quota errors
        """
        payload = {
            "model": generation_config.model,
            "messages": [
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": user_message},
            ],
            "temperature": generation_config.temperature,
            "top_p": generation_config.top_p,
        }

        try:
            response = self._client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=self._headers,
                timeout=self.timeout,
            )
        except httpx.TimeoutException as e:
            raise GenerationTimeoutError(f"Generation timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            raise GenerationError(f"Generation request failed: {e}") from e

        if response.status_code == 429:
            raise GenerationError(f"Generation rate limited or over quota: {response.text[:200]}")
        if response.status_code != 200:
            raise GenerationError(
                f"Generation API error {response.status_code}: {response.text[:200]}"
            )

        try:
            data = response.json()
        except ValueError as e:
            raise GenerationError(f"Failed to parse generation response as JSON: {e}") from e

        return extract_message_content(data)

    def close(self) -> None:
        self._client.close()
