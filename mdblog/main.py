import logging

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from mdblog.routers import posts
from mdblog.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="mdblog", description="Markdown blog server")

app.include_router(posts.router)
app.mount(
    "/static",
    StaticFiles(directory=settings.STATIC_DIR, check_dir=False),
    name="static",
)


@app.get("/healthz")
async def healthz():
    return {"status": "ok"}


def run():
    logger.info(
        f"Serving posts from {settings.POSTS_DIR} on {settings.HOST}:{settings.PORT}"
    )
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
