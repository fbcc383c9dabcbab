"""FastAPI app serving the single-page review analysis form.

Usage:
    uvicorn reviewlens.main_web:app
"""

from urllib.parse import parse_qs

from fastapi import FastAPI, Request, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import HTMLResponse
from pydantic import BaseModel

from .config import get_settings
from .controller.analysis_controller import AnalysisController, AnalysisInFlightError
from .controller.state import AnalysisState
from .log import setup_logging, get_logger
from .rendering.html_page import render_page

settings = get_settings()
setup_logging()
logger = get_logger("web")

app = FastAPI(title=settings.APP_TITLE)

# Single page, single user: one controller for the process
controller = AnalysisController()


class AnalyzeRequest(BaseModel):
    text: str


@app.get("/", response_class=HTMLResponse)
def index():
    return render_page(controller.state, title=settings.APP_TITLE)


@app.post("/analyze", response_class=HTMLResponse)
async def analyze_form(request: Request):
    body = (await request.body()).decode("utf-8", errors="replace")
    draft = parse_qs(body, keep_blank_values=True).get("review", [""])[0]

    try:
        state = await run_in_threadpool(controller.run_analysis, draft)
    except AnalysisInFlightError:
        logger.info("Form submitted while an analysis is running, ignoring.")
        state = controller.state

    return render_page(state, draft=draft, title=settings.APP_TITLE)


@app.post("/api/analyze", response_model=AnalysisState)
def analyze_api(payload: AnalyzeRequest):
    try:
        return controller.run_analysis(payload.text)
    except AnalysisInFlightError as e:
        raise HTTPException(409, str(e))


@app.get("/api/state", response_model=AnalysisState)
def current_state():
    return controller.state


@app.get("/health")
def health():
    return {"status": "ok"}
