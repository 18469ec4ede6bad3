"""
Minimal completion client wrapper using Google Gemini.

Rationale:
- Use the google-genai SDK: its GenerateContentConfig carries the Google Search
  tool through to the request.
- Keep interface tiny: await complete(CompletionRequest) -> Completion.
- No retries / no fallback. A timeout is applied per request at this boundary.
"""

import logging
from typing import Dict, List, Optional

from google import genai
from google.genai import types

from .config import Settings
from .errors import TransportError
from .schemas import Completion, CompletionRequest

logger = logging.getLogger(__name__)


def build_config(request: CompletionRequest) -> types.GenerateContentConfig:
    """
    Translate a CompletionRequest into the SDK's generation config.
    """
    tools = None
    if request.web_search:
        tools = [types.Tool(google_search=types.GoogleSearch())]
    return types.GenerateContentConfig(
        system_instruction=request.system_instruction,
        tools=tools,
        temperature=request.temperature,
    )


class GeminiClient:
    """
    Completion collaborator backed by Gemini with Google Search grounding.
    """

    def __init__(self, settings: Settings, client: Optional[genai.Client] = None):
        self.settings = settings
        # HttpOptions.timeout is in milliseconds
        self.client = client or genai.Client(
            api_key=settings.api_key,
            http_options=types.HttpOptions(timeout=int(settings.request_timeout * 1000)),
        )

    async def complete(self, request: CompletionRequest) -> Completion:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.settings.model_name,
                contents=request.prompt,
                config=build_config(request),
            )
        except Exception as e:
            raise TransportError(f"Gemini API error: {str(e)}") from e

        return Completion(text=_response_text(response), citations=_grounding_citations(response))


def _response_text(response) -> Optional[str]:
    """
    Return the completion text, or None when the response carries no text.
    """
    text = response.text
    if not text:
        # No text parts (e.g. safety block or other finish reasons)
        if response.candidates:
            logger.warning(f"Gemini returned no text. Finish reason: {response.candidates[0].finish_reason}")
        else:
            logger.warning("Gemini returned no candidates.")
    return text


def _grounding_citations(response) -> List[Dict[str, Optional[str]]]:
    """
    Pull raw {uri, title} citation candidates out of the grounding metadata, if any.
    """
    if not response.candidates:
        return []
    metadata = getattr(response.candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []

    citations = []
    for chunk in chunks:
        web = getattr(chunk, "web", None)
        if web is None:
            continue
        citations.append({
            "uri": getattr(web, "uri", None),
            "title": getattr(web, "title", None),
        })
    return citations
