from fastapi import FastAPI

from backend.app.core.log_config import configure_logging
from .routes import scrape, generate, video

configure_logging()

app = FastAPI(title="Dealer Ad Studio API", version="0.1.0")

app.include_router(scrape.router, prefix="/scrape", tags=["scrape"])
app.include_router(generate.router, prefix="/generate", tags=["generate"])
app.include_router(video.router, prefix="/video", tags=["video"])
