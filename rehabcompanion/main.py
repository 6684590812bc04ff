"""rehabcompanion FastAPI application."""

from __future__ import annotations

import logging

from fastapi import FastAPI

from rehabcompanion.api import doctor, garden, health, messages, mood, profile, tasks
from rehabcompanion.core.config import settings

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
)

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app.include_router(health.router)
app.include_router(mood.router)
app.include_router(tasks.router)
app.include_router(garden.router)
app.include_router(doctor.router)
app.include_router(messages.router)
app.include_router(profile.router)
