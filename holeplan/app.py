from __future__ import annotations

import os

from fastapi import APIRouter, Depends, FastAPI, HTTPException, Request, status
from fastapi.middleware.cors import CORSMiddleware

from holeplan import __version__
from holeplan.api.health import health as _health_handler
from holeplan.metrics import MetricsMiddleware, metrics_app

from .routes.caddie_drag import router as caddie_drag_router
from .routes.caddie_plan import router as caddie_plan_router


def _api_key_dependency():
    async def _dep(request: Request):
        required = os.getenv("API_KEY")
        if not required:
            return
        provided = request.headers.get("x-api-key")
        if provided != required:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED, detail="invalid api key"
            )

    return _dep


app = FastAPI(title="holeplan", version=__version__)

allow = os.getenv("CORS_ALLOW_ORIGINS", "http://localhost,http://127.0.0.1").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in allow if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(MetricsMiddleware)

api_dep = _api_key_dependency()

app.include_router(caddie_plan_router, dependencies=[Depends(api_dep)])
app.include_router(caddie_drag_router, dependencies=[Depends(api_dep)])
app.add_api_route(
    "/health",
    _health_handler,
    methods=["GET"],
    response_model=None,
    tags=["health"],
)


_metrics_router = APIRouter()


@_metrics_router.get("/metrics", include_in_schema=False)
async def _metrics_endpoint(request: Request):
    return await metrics_app(request)


app.include_router(_metrics_router)
