"""
Quiz Bot API - FastAPI Server
Main entry point: session control, question extraction and quiz solving.
"""

import os
import logging
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import HTMLResponse, JSONResponse
from pydantic import BaseModel, ConfigDict, ValidationError
from pydantic.alias_generators import to_camel
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

from quizbot.session import SessionManager, SessionNotFound
from quizbot.solver_core import QuizSolver

sessions = SessionManager()
solver = QuizSolver()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    logger.info("Shutting down, closing sessions")
    await sessions.close_all()


app = FastAPI(
    title="Quiz Bot API",
    description="Drives a browser through a quiz page and answers it with a language model",
    version="1.0.0",
    lifespan=lifespan
)


class CamelRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartSessionRequest(CamelRequest):
    """Request model for starting a session."""
    groq_api_key: Optional[str] = None


class SessionRequest(CamelRequest):
    """Request model for calls addressed to one session."""
    session_id: Optional[str] = None


class NavigateRequest(SessionRequest):
    url: Optional[str] = None


class SolveRequest(SessionRequest):
    auto_submit: bool = False


def _get_session(session_id: Optional[str]):
    if not session_id:
        raise HTTPException(status_code=400, detail="Session ID is required")
    try:
        return sessions.get(session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")


@app.get("/")
async def root():
    """Root endpoint with API documentation."""
    html = """
    <!DOCTYPE html>
    <html>
    <head><title>Quiz Bot API</title></head>
    <body>
        <h1>Quiz Bot API</h1>
        <ul>
            <li><code>POST /api/start-session</code> {"groqApiKey": "..."}</li>
            <li><code>POST /api/navigate</code> {"sessionId": "...", "url": "..."}</li>
            <li><code>POST /api/extract-questions</code> {"sessionId": "..."}</li>
            <li><code>POST /api/solve-quiz</code> {"sessionId": "...", "autoSubmit": false}</li>
            <li><code>POST /api/close-session</code> {"sessionId": "..."}</li>
            <li><code>GET /api/health</code></li>
        </ul>
    </body>
    </html>
    """
    return HTMLResponse(content=html)


@app.get("/api/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "activeSessions": len(sessions),
        "headless": sessions.browser.headless
    }


@app.post("/api/start-session")
async def start_session(request: StartSessionRequest):
    """Open a browser page bound to a Groq key."""
    if not request.groq_api_key:
        raise HTTPException(status_code=400, detail="Groq API key is required")

    try:
        session = await sessions.start(request.groq_api_key)
    except Exception as e:
        logger.error(f"Error starting session: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "sessionId": session.session_id,
        "message": "Session started successfully"
    }


@app.post("/api/navigate")
async def navigate(request: NavigateRequest):
    """Load the quiz URL in the session's page."""
    if not request.session_id or not request.url:
        raise HTTPException(status_code=400, detail="Session ID and URL are required")
    if not request.url.startswith(("http://", "https://")):
        raise HTTPException(status_code=400, detail="Invalid URL format")

    session = _get_session(request.session_id)
    try:
        async with session.lock:
            await sessions.browser.navigate(session.page, request.url)
    except Exception as e:
        logger.error(f"Navigation error: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "message": "Navigated successfully"}


@app.post("/api/extract-questions")
async def extract_questions(request: SessionRequest):
    """Detect questions on the current page and remember them for solving."""
    session = _get_session(request.session_id)

    async with session.lock:
        report = await solver.extract(session.page)
        session.questions = report.questions

    return {"success": True, **report.to_dict()}


@app.post("/api/solve-quiz")
async def solve_quiz(request: SolveRequest):
    """Answer the session's extracted questions and optionally submit."""
    session = _get_session(request.session_id)

    try:
        async with session.lock:
            report = await solver.solve(
                session.page,
                session.client,
                session.questions,
                auto_submit=request.auto_submit
            )
    except Exception as e:
        logger.error(f"Error solving quiz: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, **report.to_dict()}


@app.post("/api/close-session")
async def close_session(request: SessionRequest):
    """Close the session's page."""
    session = _get_session(request.session_id)

    try:
        await sessions.close(session.session_id)
    except SessionNotFound:
        raise HTTPException(status_code=404, detail="Session not found")
    except Exception as e:
        logger.error(f"Error closing session: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return {"success": True, "message": "Session closed"}


@app.exception_handler(RequestValidationError)
@app.exception_handler(ValidationError)
async def validation_exception_handler(request, exc):
    """Handle Pydantic validation errors."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid JSON body", "errors": jsonable_encoder(exc.errors())}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """Handle general exceptions."""
    logger.error(f"Unexpected error: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "3000")))
