from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.generate import router as generate_router
from app.core.config import get_settings
from app.services.generator_factory import get_generator


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    get_generator(settings)
    yield


app = FastAPI(title="Recipe Generator", version="0.1.0", lifespan=lifespan)
app.include_router(generate_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}
