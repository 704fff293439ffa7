from pathlib import Path
import logging
import os

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from cog_browser.api.browser import router as browser_router

LOG_LEVEL_ENV_VAR = "COG_BROWSER_LOG_LEVEL"

# Configure logging
logging.basicConfig(
    level=os.environ.get(LOG_LEVEL_ENV_VAR, "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Red Discord Bot - Cog Index",
    version="0.1.0",
    description="Searchable, paginated browser for the Red cog index.",
)


# Static files (CSS)
app.mount(
    "/static",
    StaticFiles(directory=str(Path(__file__).resolve().parent / "static")),
    name="static",
)


@app.get("/health")
async def health() -> dict:
    """
    Lightweight health check endpoint.
    """
    return {"status": "ok"}


app.include_router(browser_router, tags=["catalog"])


if __name__ == "__main__":
    """
    Allow running `python -m cog_browser.main` to start the Uvicorn
    development server.
    """
    import uvicorn

    uvicorn.run(
        "cog_browser.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
