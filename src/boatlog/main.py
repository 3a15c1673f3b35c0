from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError

from src.boatlog.config import load_config
from src.boatlog.routers import account, activity, admin, alerts, boats, components, costs, health, parts
from src.boatlog.schemas.common import ErrorResponse
from src.boatlog.state import get_state, init_state

openapi_tags = [
    {"name": "Health", "description": "Liveness and store connectivity."},
    {"name": "Account", "description": "The caller's internal account record."},
    {"name": "Alerts", "description": "Service-due and expiry alerts computed on every request."},
    {"name": "Activity", "description": "Recent maintenance, health check and document activity."},
    {"name": "Boats", "description": "Boats and the records scoped to them."},
    {"name": "Components", "description": "Component updates, alert dismissal and quick completion."},
    {"name": "Parts", "description": "Parts carried or installed on a boat."},
    {"name": "Costs", "description": "Spend summaries from costed maintenance log entries."},
    {"name": "Admin", "description": "Operator-only diagnostics."},
]

logger = logging.getLogger(__name__)

_config = load_config()
logging.basicConfig(level=getattr(logging, _config.log_level, logging.INFO))

app = FastAPI(
    title="Boat Maintenance Log API",
    description=(
        "Backend API for the boat maintenance log. Owners track boats, components, maintenance logs, "
        "documents, health checks, crew and safety equipment. Alerts and activity feeds are computed "
        "from stored state on each request."
    ),
    version="1.0.0",
    openapi_tags=openapi_tags,
)

init_state(app, _config)


@app.on_event("startup")
async def _on_startup() -> None:
    """Connect to MongoDB, fail fast if it is unreachable, then ensure indexes."""
    state = get_state(app)
    state.mongo.connect_app()
    if not state.mongo.ping():
        raise RuntimeError("MongoDB is unreachable at startup. Verify BACKEND_MONGO_URI.")
    state.mongo.init_indexes()
    logger.info("Boat log API ready (db=%s, cors_origins=%s)", _config.mongo_db_name, len(_config.cors_allow_origins))


@app.on_event("shutdown")
async def _on_shutdown() -> None:
    get_state(app).mongo.close()


def _internal_error() -> JSONResponse:
    return JSONResponse(status_code=500, content=ErrorResponse(detail="Internal server error").model_dump())


@app.exception_handler(PyMongoError)
async def _store_error_handler(request: Request, exc: PyMongoError) -> JSONResponse:
    logger.exception("Store failure on %s %s", request.method, request.url.path)
    return _internal_error()


@app.exception_handler(Exception)
async def _unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _internal_error()


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(_config.cors_allow_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(account.router)
app.include_router(alerts.router)
app.include_router(activity.router)
app.include_router(boats.router)
app.include_router(components.router)
app.include_router(parts.router)
app.include_router(costs.router)
app.include_router(admin.router)
