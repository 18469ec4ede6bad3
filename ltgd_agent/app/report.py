"""
Core orchestration for one report.

Flow:
1. Build the completion request (fixed system instruction + user prompt,
   Google Search grounding enabled, low temperature)
2. Single completion call
3. Deduplicate grounding citations into sources
4. Parse the completion and normalize its chart
5. Return a ReportResult

Every failure is folded into a degraded ReportResult: callers only ever see
the success path.
"""

import logging
import os
from typing import Optional, Protocol

from .charts import normalize_chart
from .errors import EmptyPayload, ReportError
from .parser import parse_response
from .schemas import Completion, CompletionRequest, ReportResult
from .sources import dedupe_sources

logger = logging.getLogger(__name__)

# Prompt file paths
BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SYSTEM_PROMPT_PATH = os.path.join(BASE_DIR, "prompts", "ltgd_system.txt")

ERROR_PREFIX = "Sorry, I encountered an error while processing your request: "
UNKNOWN_ERROR = "An unknown error occurred."


class CompletionClient(Protocol):
    async def complete(self, request: CompletionRequest) -> Completion:
        ...


def _read_prompt(path: str) -> str:
    """Read a prompt text file."""
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def degraded_result(error: BaseException) -> ReportResult:
    """Turn a captured error into a displayable result."""
    message = str(error) or UNKNOWN_ERROR
    return ReportResult(analysis=f"{ERROR_PREFIX}{message}", chart=None, sources=[])


class ReportService:
    def __init__(
        self,
        client: CompletionClient,
        system_instruction: Optional[str] = None,
        temperature: float = 0.2,
    ):
        self.client = client
        self.system_instruction = system_instruction or _read_prompt(SYSTEM_PROMPT_PATH)
        self.temperature = temperature

    def build_request(self, prompt: str) -> CompletionRequest:
        return CompletionRequest(
            prompt=prompt,
            system_instruction=self.system_instruction,
            web_search=True,
            temperature=self.temperature,
        )

    async def generate_report(self, prompt: str) -> ReportResult:
        """
        Produce a ReportResult for the prompt. Never raises.
        """
        try:
            return await self._generate(prompt)
        except ReportError as e:
            logger.error(f"Report failed: {type(e).__name__}: {e}")
            return degraded_result(e)
        except Exception as e:
            logger.exception(f"Unexpected error while generating report: {e}")
            return degraded_result(e)

    async def _generate(self, prompt: str) -> ReportResult:
        completion = await self.client.complete(self.build_request(prompt))
        if not completion.text or not completion.text.strip():
            raise EmptyPayload("Received an empty response from the AI.")
        logger.debug(f"LLM raw response: {completion.text}")

        sources = dedupe_sources(completion.citations)

        parsed = parse_response(completion.text)
        chart = normalize_chart(parsed.chart)
        if not parsed.analysis:
            logger.warning("Completion is missing the 'analysis' field")

        logger.info(
            f"Report ready: {len(parsed.analysis)} chars, "
            f"chart={chart.chart_type if chart else None}, sources={len(sources)}"
        )
        return ReportResult(analysis=parsed.analysis, chart=chart, sources=sources)
