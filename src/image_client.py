"""Images API client - render a prompt and fetch the resulting PNG."""

import httpx

import config
from src.models import Wordset


class ImageGenerationError(Exception):
    """Raised when image generation or download fails."""

    pass


def build_image_prompt(wordset: Wordset) -> str:
    """Turn one wordset into an image prompt."""
    return f"No text overlay. A visual interpretation of: {', '.join(wordset)}."


class ImageClient:
    """OpenAI-compatible images client."""

    def __init__(
        self,
        api_key: str = config.OPENAI_API_KEY,
        base_url: str = config.OPENAI_BASE_URL,
        model: str = config.IMAGE_MODEL,
        size: str = config.IMAGE_SIZE,
        timeout: float = config.IMAGE_TIMEOUT,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.size = size
        self.timeout = timeout
        self._client = client or httpx.Client()
        self._headers = {"Authorization": f"Bearer {api_key}"}

    def generate_image_url(self, prompt: str) -> str:
        """
        Request one image for a prompt.

        Returns:
            URL of the rendered image

        Raises:
            ImageGenerationError: If the request fails or returns no URL
        """
        try:
            response = self._client.post(
                f"{self.base_url}/images/generations",
                json={"model": self.model, "prompt": prompt, "n": 1, "size": self.size},
                headers=self._headers,
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"Image generation failed: {e}") from e
        except ValueError as e:
            raise ImageGenerationError(f"Failed to parse image response: {e}") from e

        items = data.get("data") if isinstance(data, dict) else None
        url = items[0].get("url") if items else None
        if not url:
            raise ImageGenerationError("No image URL returned.")
        return url

    def download(self, url: str) -> bytes:
        """Fetch the bytes behind an image URL."""
        try:
            response = self._client.get(url, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageGenerationError(f"Image download failed: {e}") from e
        return response.content

    def render(self, prompt: str) -> bytes:
        """Generate an image and return its bytes."""
        return self.download(self.generate_image_url(prompt))

    def close(self) -> None:
        self._client.close()
