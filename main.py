from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from contextlib import asynccontextmanager

from core.harbour_time import harbour_now
from core.logging_config import setup_logging
from core.scheduler import Scheduler

# Feature routes
from features.harbour.routes.harbour_routes import router as harbour_router

# Services and clients
from features.common.services.proxy_channel import ProxyChannel
from features.harbour.services.update_orchestrator import UpdateOrchestrator
from features.tides.services.tide_service import TideService
from features.weather.services.weather_service import WeatherService
from features.wind.services.wind_wave_service import WindWaveService

setup_logging()
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    channel = ProxyChannel()
    scheduler = None
    try:
        logger.info("🚀 Starting Harbour Conditions API...")

        orchestrator = UpdateOrchestrator(
            channel=channel,
            tide_service=TideService(channel),
            wind_wave_service=WindWaveService(channel),
            weather_service=WeatherService(channel)
        )
        app.state.channel = channel
        app.state.orchestrator = orchestrator

        # First refresh runs immediately from the scheduler
        scheduler = Scheduler(orchestrator)
        scheduler.start()
        app.state.scheduler = scheduler

        logger.info("✨ API startup complete - ready to serve requests")
        yield

    except Exception as e:
        logger.error(f"❌ Startup error: {str(e)}")
        raise
    finally:
        logger.info("🔄 Shutting down API...")
        if scheduler:
            scheduler.shutdown()
        await channel.close()
        logger.info("👋 API shutdown complete")

app = FastAPI(
    title="Harbour Conditions API",
    description="Tide, marina gate and sailing conditions for St Peter Port",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(harbour_router)

@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "time": harbour_now().isoformat()
    }

if __name__ == "__main__":
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", 5010))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=True,
        log_level="info",
        workers=1
    )
