"""
FastAPI entrypoint.

Routes:
- POST /report: one stateless report (analysis, chart, sources, Chart.js config)
- GET /conversation, POST /conversation/messages: in-memory chat
- GET /examples: example prompts for an empty chat
- GET /health

Settings are loaded at import: a missing API key aborts startup.
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from .config import load_settings

settings = load_settings()

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.log_level, logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from contextlib import asynccontextmanager
from fastapi import Depends, FastAPI, HTTPException
from typing import List

from .charts import to_chartjs
from .conversation import EXAMPLE_PROMPTS, ConversationController
from .errors import ConversationBusyError, ConversationClosedError
from .llm_client import GeminiClient
from .report import ReportService
from .schemas import ConversationEntry, PromptRequest, ReportResponse

report_service = ReportService(GeminiClient(settings), temperature=settings.temperature)
conversation = ConversationController(report_service)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    conversation.close()


app = FastAPI(title="LTGD Debt Analysis Agent", lifespan=lifespan)


def get_report_service() -> ReportService:
    return report_service


def get_conversation() -> ConversationController:
    return conversation


def _require_prompt(body: PromptRequest) -> str:
    if not body.prompt.strip():
        raise HTTPException(status_code=400, detail="prompt must not be empty")
    return body.prompt


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.get("/examples", response_model=List[str])
async def examples():
    return EXAMPLE_PROMPTS


@app.post("/report", response_model=ReportResponse)
async def report_endpoint(
    body: PromptRequest,
    service: ReportService = Depends(get_report_service),
):
    prompt = _require_prompt(body)
    result = await service.generate_report(prompt)
    chartjs = to_chartjs(result.chart) if result.chart else None
    return ReportResponse(**result.model_dump(), chartjs=chartjs)


@app.get("/conversation", response_model=List[ConversationEntry])
async def conversation_history(
    controller: ConversationController = Depends(get_conversation),
):
    return list(controller.entries)


@app.post("/conversation/messages", response_model=ConversationEntry)
async def send_message(
    body: PromptRequest,
    controller: ConversationController = Depends(get_conversation),
):
    prompt = _require_prompt(body)
    try:
        return await controller.send(prompt)
    except ConversationBusyError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ConversationClosedError as e:
        raise HTTPException(status_code=503, detail=str(e))
