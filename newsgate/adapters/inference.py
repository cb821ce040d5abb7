"""Hosted model inference: article summarization and image/text checks."""

import logging

import httpx

from newsgate.config import settings

logger = logging.getLogger(__name__)


class InferenceError(Exception):
    """Raised when an inference endpoint fails or returns an error body."""


class InferenceClient:
    """Thin client over the summarization model and the clip-check space."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_key: str | None = None,
        summarizer_url: str | None = None,
        clip_check_url: str | None = None,
    ):
        self._http = http_client
        self._api_key = settings.hf_api_key if api_key is None else api_key
        self._summarizer_url = summarizer_url or settings.summarizer_url
        self._clip_check_url = clip_check_url or settings.clip_check_url

    async def _post_json(self, url: str, payload: dict, headers: dict | None = None):
        try:
            response = await self._http.post(url, json=payload, headers=headers)
            return response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise InferenceError(str(e)) from e

    async def summarize(self, text: str) -> str:
        """Return a summary of ``text``."""
        headers = {"Authorization": f"Bearer {self._api_key}"} if self._api_key else None
        data = await self._post_json(self._summarizer_url, {"inputs": text}, headers)

        if isinstance(data, dict) and data.get("error"):
            raise InferenceError(str(data["error"]))
        if isinstance(data, list) and data and isinstance(data[0], dict):
            return data[0].get("summary_text") or "No summary returned"
        return "No summary returned"

    async def clip_match(self, text: str, image_url: str) -> dict:
        """Score how well an image matches the article text."""
        data = await self._post_json(
            self._clip_check_url, {"text": text, "image_url": image_url}
        )
        if not isinstance(data, dict):
            raise InferenceError("Unexpected response from clip-check")
        return {
            "similarity_score": data.get("similarity_score"),
            "verdict": data.get("verdict"),
        }
