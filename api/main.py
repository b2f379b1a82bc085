"""FastAPI main application - agent registry service entry point."""

import logging
import os
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from erc8004_agent.constants import SUPPORTED_NETWORKS
from erc8004_agent.database import Base, engine

from .middleware import logging_middleware
from .routes import links as links_routes
from .routes import registry as registry_routes

# Load environment variables
load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown."""
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized")
    yield
    logger.info("Shutting down...")


app = FastAPI(
    title="ERC-8004 Agent Registry",
    description="Registration status, stake lookups and wallet linking for ERC-8004 agents",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.middleware("http")(logging_middleware)

app.include_router(registry_routes.router, prefix="/api/registry", tags=["registry"])
app.include_router(links_routes.router, prefix="/api/telegram", tags=["telegram"])


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "ERC-8004 Agent Registry",
        "version": "0.1.0",
        "networks": list(SUPPORTED_NETWORKS),
        "endpoints": {
            "/health": "GET - Health check",
            "/api/registry/{network}/owners/{owner}": "GET - Registration status for an owner",
            "/api/registry/{network}/agents/{agent_id}/stake": "GET - Stake held by an agent",
            "/api/telegram/link": "POST - Link a Telegram profile to a wallet",
            "/api/telegram/{telegram_id}": "GET - Wallet linked to a Telegram profile",
        },
    }


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "api.main:app",
        host=os.getenv("API_HOST", "0.0.0.0"),
        port=int(os.getenv("API_PORT", "8000")),
        reload=False,
    )
