from pydantic import BaseModel
import os

BROWSER_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)

class Settings(BaseModel):
    venice_api_key: str | None = os.getenv("VENICE_API_KEY")
    venice_base_url: str = os.getenv("VENICE_BASE_URL", "https://api.venice.ai/api/v1")
    venice_text_model: str = os.getenv("VENICE_TEXT_MODEL", "llama-3.3-70b")
    venice_video_model: str = os.getenv("VENICE_VIDEO_MODEL", "sora-2-text-to-video")
    scrape_user_agent: str = os.getenv("SCRAPE_USER_AGENT", BROWSER_USER_AGENT)
    fetch_timeout_seconds: float = float(os.getenv("FETCH_TIMEOUT_SECONDS", "20"))
    generation_timeout_seconds: float = float(os.getenv("GENERATION_TIMEOUT_SECONDS", "60"))
    video_prompt_max_chars: int = int(os.getenv("VIDEO_PROMPT_MAX_CHARS", "500"))
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

settings = Settings()
