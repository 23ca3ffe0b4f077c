from __future__ import annotations

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pool_apr.api.routers.apr_estimate import router as apr_estimate_router
from pool_apr.api.routers.pools import router as pools_router
from pool_apr.api.routers.ticks import router as ticks_router
from pool_apr.shared.config import get_settings

settings = get_settings()
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)

app = FastAPI(title="Pool APR API")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(pools_router)
app.include_router(apr_estimate_router)
app.include_router(ticks_router)


@app.get("/health")
def health():
    return {"status": "ok", "data_source": get_settings().pool_data_source}
