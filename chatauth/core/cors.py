from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from chatauth.core.settings import Settings


def add_cors_middleware(app: FastAPI, settings: Settings) -> None:
    # Credentialed requests need the session cookie to cross origins.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )
