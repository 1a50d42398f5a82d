"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from draft_desk.api.routes.draft import router as draft_router
from draft_desk.api.websockets.draft_ws import draft_websocket
from draft_desk.config import settings
from draft_desk.repositories.match_stats_repository import MatchStatsRepository
from draft_desk.repositories.room_store import RoomStore
from draft_desk.services.champion_catalog import ChampionMetaCatalog
from draft_desk.services.draft_machine import DraftStateMachine
from draft_desk.services.llm_enricher import LLMEnricher
from draft_desk.services.recommendation_engine import RecommendationEngine

REPO_ROOT = Path(__file__).parent.parent.parent

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def resolve_path(path: str) -> Path:
    """Resolve a settings path; relative paths are taken from the repo root."""
    resolved = Path(path)
    return resolved if resolved.is_absolute() else REPO_ROOT / resolved


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler for startup/shutdown events."""
    # Startup: tests may pre-populate app.state with their own services
    if not hasattr(app.state, "machine"):
        knowledge_dir = resolve_path(settings.knowledge_dir) if settings.knowledge_dir else None
        catalog = ChampionMetaCatalog(knowledge_dir)
        app.state.match_stats = (
            MatchStatsRepository(resolve_path(settings.match_stats_path))
            if settings.match_stats_path
            else None
        )
        engine = RecommendationEngine(
            catalog, performance=app.state.match_stats, limit=settings.recommendation_limit
        )
        app.state.machine = DraftStateMachine(RoomStore(), catalog, engine)
    if not hasattr(app.state, "enricher"):
        app.state.enricher = None
        if settings.enable_llm and settings.llm_api_key:
            app.state.enricher = LLMEnricher(
                api_key=settings.llm_api_key,
                engine=app.state.machine.engine,
                api_url=settings.llm_api_url,
                model=settings.llm_model,
                timeout=settings.llm_timeout,
            )
            logger.info(f"LLM enrichment enabled with model {settings.llm_model}")
    yield
    # Shutdown: Clean up resources
    if app.state.enricher is not None:
        await app.state.enricher.close()
    match_stats = getattr(app.state, "match_stats", None)
    if match_stats is not None:
        match_stats.close()


app = FastAPI(
    title="Draft Desk",
    description="LoL Draft Assistant - Live draft tracking and recommendations",
    version="0.1.0",
    lifespan=lifespan,
)

# Configure CORS for frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy", "service": "draft-desk"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Draft Desk API",
        "version": "0.1.0",
        "docs": "/docs",
    }


# Register routers
app.include_router(draft_router)


# WebSocket endpoint for live drafting
@app.websocket("/ws/draft/{room_id}")
async def websocket_draft(websocket: WebSocket, room_id: str):
    """WebSocket endpoint for an interactive draft room."""
    await draft_websocket(
        websocket,
        room_id,
        app.state.machine,
        app.state.enricher,
    )


def run():
    """Serve the API with uvicorn using host and port from settings."""
    import uvicorn

    uvicorn.run(
        "draft_desk.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
        log_level=settings.log_level.lower(),
    )
