"""
FastAPI implementation for the legal intake assistant.
"""
import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, List, Optional
from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field
import uvicorn
import time

from config import APP_CONFIG
from main import build_assistant
from models.lawyer import LawyerRecord
from models.state import ConversationState
from services.orchestrator_service import ProcessResult
from utils.errors import PersistenceError

# Configure logging
logging.basicConfig(
    level=APP_CONFIG["log_level"],
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def create_app(system: Optional[Dict[str, Any]] = None) -> FastAPI:
    """
    Create the API application.

    Args:
        system: Components from build_assistant(); built on startup if omitted
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.system = system or build_assistant()
        yield
        if system is None:
            await app.state.system["directory"].aclose()

    app = FastAPI(
        title="Legal Intake Assistant API",
        description="Conversation-state extraction and lawyer search for legal intake chat",
        version="1.0.0",
        lifespan=lifespan
    )

    # API Models
    class MessageRequest(BaseModel):
        """Chat message request model."""
        message: str = Field(..., min_length=1, max_length=4000)

    def components() -> Dict[str, Any]:
        return app.state.system

    # API Routes
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {"message": "Legal Intake Assistant API"}

    @app.post("/chat/{session_id}/messages", response_model=ProcessResult)
    async def process_message(session_id: str, request: MessageRequest):
        """
        Process one user message and return the updated conversation state.
        """
        logger.info(f"Message request: session={session_id}")
        return await components()["orchestrator"].process(request.message, session_id)

    @app.get("/chat/{session_id}/state", response_model=ConversationState)
    async def get_state(session_id: str):
        """
        Get the stored conversation state for a session.
        """
        try:
            state = await components()["store"].get(session_id)
        except PersistenceError as e:
            logger.error(f"Error reading state: {str(e)}")
            raise HTTPException(status_code=503, detail="Conversation state unavailable")

        if state is None:
            raise HTTPException(status_code=404, detail=f"No state for session {session_id}")
        return state

    @app.get("/chat/{session_id}/lawyers", response_model=List[LawyerRecord])
    async def find_lawyers(
        session_id: str,
        case_type: Optional[str] = Query(None, description="Override the case type, e.g. 'DUI' or 'car accident'")
    ):
        """
        Search lawyers for the session's conversation state.
        """
        return await components()["lawyer_search"].search_for_session(session_id, case_type_override=case_type)

    @app.delete("/chat/{session_id}")
    async def clear_session(session_id: str):
        """
        Delete a chat session's conversation state.
        """
        try:
            await components()["store"].clear(session_id)
        except PersistenceError as e:
            logger.error(f"Error clearing session: {str(e)}")
            raise HTTPException(status_code=503, detail="Conversation state unavailable")
        return {"message": f"Session {session_id} cleared successfully"}

    @app.get("/health")
    async def health_check():
        """
        Health check endpoint.
        """
        health_metrics = components()["monitor"].get_system_health()
        health_metrics["status"] = "healthy"
        health_metrics["timestamp"] = time.time()
        return health_metrics

    @app.get("/metrics")
    async def get_metrics():
        """
        Get conversation and search metrics.
        """
        return components()["monitor"].get_performance_report()

    return app


app = create_app()

if __name__ == "__main__":
    # Run the API using Uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
