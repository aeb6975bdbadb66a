"""NEBULA DEFENDER - headless simulation server.

Main FastAPI application.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from app.config import settings
from app.routers import game_router, ws_router
from nebula import __version__
from nebula.comms.event_bus import EventBus
from nebula.simulation.engine import SimulationEngine
from nebula.simulation.highscore import HighScoreStore


def _create_simulation_engine() -> SimulationEngine:
    """Create a SimulationEngine from settings."""
    store = HighScoreStore(settings.highscore_path)
    engine = SimulationEngine(
        EventBus(),
        width=settings.simulation_width,
        height=settings.simulation_height,
        seed=settings.simulation_seed,
        wave_policy=settings.wave_policy,
        high_score_store=store,
        tick_rate=settings.tick_rate,
    )
    logger.info(
        f"Simulation engine created ({settings.simulation_width:.0f}x"
        f"{settings.simulation_height:.0f}, waves by {settings.wave_policy}, "
        f"high score {engine.game_mode.high_score})"
    )
    return engine


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("=" * 60)
    logger.info(f"  {settings.app_name} v{__version__} - INITIALIZING")
    logger.info("=" * 60)

    sim_engine = _create_simulation_engine()
    app.state.simulation_engine = sim_engine
    if settings.autostart:
        sim_engine.start()

    logger.info(f"  {settings.app_name} ONLINE")

    yield

    logger.info("Stopping simulation engine...")
    sim_engine.stop()
    sim_engine.wait_for_persistence()
    logger.info(f"{settings.app_name} shutting down...")


app = FastAPI(
    title=settings.app_name,
    description="Threat simulation and combat resolution engine",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(game_router)
app.include_router(ws_router)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {
        "status": "operational",
        "version": __version__,
        "system": settings.app_name,
    }


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    import uvicorn

    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level="debug" if settings.debug else "info",
    )


if __name__ == "__main__":
    run()
