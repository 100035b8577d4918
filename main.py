# main.py
import logging

from fastapi import FastAPI

from congregation_reports.config import settings
from congregation_reports.reports.routes import router as reports_router

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

app = FastAPI(title="Congregation Reports", version="1.0.0")

# Healthcheck
@app.get("/healthz")
def healthcheck():
    return {"ok": True}

# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(reports_router)
