"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cardhydrate.config import settings

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.cardhydrate_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)


def create_app() -> FastAPI:
    app = FastAPI(
        title="CardHydrate",
        description="Business-card template hydration — brand profile in, render-ready objects out",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    from cardhydrate.api.router import api_router

    app.include_router(api_router)

    return app


app = create_app()
