"""
FastAPI Application Entry Point for HoldemTutor.

This module creates and configures the FastAPI application with:
- HTTP routes for the trainer session
- CORS middleware so a local UI served elsewhere can call it
"""

import logging
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from holdemtutor import __version__
from holdemtutor.core.rules import TableConfig
from holdemtutor.core.trainer import HoldemTrainer
from holdemtutor.server.routes import router

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(config: Optional[TableConfig] = None) -> FastAPI:
    """
    Create and configure the FastAPI application.

    Args:
        config: Table settings; read from HOLDEMTUTOR_* variables when omitted

    Returns:
        Configured FastAPI application instance
    """
    config = config or TableConfig.from_env()

    app = FastAPI(
        title="HoldemTutor",
        description="Heads-up Texas Hold'em trainer against a heuristic opponent",
        version=__version__,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)
    app.state.trainer = HoldemTrainer(config)

    logger.info(
        f"HoldemTutor ready: stacks ${config.starting_chips}, blinds "
        f"${config.small_blind}/${config.big_blind}, {config.difficulty.value}, "
        f"{config.language.value}"
    )
    return app


# Create the application instance
app = create_app()
