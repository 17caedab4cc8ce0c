"""PoblaGO POS service entrypoint."""

import logging
import os

from fastapi import FastAPI

from services.pos.app.routers.session import router as session_router

logging.basicConfig(
    level=os.getenv("POS_LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="PoblaGO POS API")

app.include_router(session_router)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}
