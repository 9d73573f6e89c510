# classquiz/main.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from classquiz.api.v1.endpoints import grading, health, submissions, tests
from classquiz.core.config import settings
from classquiz.core.logging_config import setup_logging
from classquiz.db.session import init_db


def create_app() -> FastAPI:
    setup_logging()

    app = FastAPI(title=settings.PROJECT_NAME)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.on_event("startup")
    def on_startup():
        init_db()

    app.include_router(tests.router, prefix="/api/v1")
    app.include_router(grading.router, prefix="/api/v1")
    app.include_router(submissions.router, prefix="/api/v1")
    app.include_router(health.router, prefix="/api/v1")
    return app


app = create_app()
