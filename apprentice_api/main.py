from __future__ import annotations

import logging

from fastapi import FastAPI

from apprentice_api.api.routers.accesses import router as accesses_router
from apprentice_api.api.routers.product_course_map import router as product_course_map_router
from apprentice_api.shared.config import get_settings


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(title="Apprentice Access API")
app.include_router(accesses_router)
app.include_router(product_course_map_router)


@app.get("/health")
def health():
    return {"status": "ok"}
