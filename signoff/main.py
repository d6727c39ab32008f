from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, Counter, generate_latest
from starlette.requests import Request
from starlette.responses import Response

from signoff.api.activity import router as activity_router
from signoff.api.assets import router as assets_router
from signoff.api.deps import require_user
from signoff.api.events import router as events_router
from signoff.api.role import router as role_router
from signoff.api.text import groups_router, items_router, sections_router
from signoff.db import Base, engine
from signoff.errors import register_error_handlers
from signoff.logging import configure_logging

REQUESTS = Counter(
    "signoff_http_requests_total",
    "Collection API requests",
    ["method", "status"],
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Schema management lives outside the app; create_all only fills gaps.
    Base.metadata.create_all(bind=engine)
    yield


app = FastAPI(title="Sign-off API", lifespan=lifespan)

configure_logging()
register_error_handlers(app)


@app.middleware("http")
async def count_requests(request: Request, call_next):
    response = await call_next(request)
    REQUESTS.labels(request.method, str(response.status_code)).inc()
    return response


for router in (
    assets_router,
    events_router,
    items_router,
    groups_router,
    sections_router,
    activity_router,
):
    app.include_router(router, dependencies=[Depends(require_user)])
app.include_router(role_router)


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
