from pydantic_settings import BaseSettings

DEFAULT_SEARXNG_URL = "http://127.0.0.1:8080"
DEFAULT_PLAYWRIGHT_SERVICE_URL = "http://127.0.0.1:3001/extract"


class Settings(BaseSettings):
    # Exa (primary search + tier 1 extraction)
    exa_api_key: str = ""
    exa_base_url: str = "https://api.exa.ai"

    # SearXNG (fallback search)
    searxng_url: str = DEFAULT_SEARXNG_URL

    # Headless render service (tier 2 extraction)
    playwright_service_url: str = ""

    # Per-call network deadlines, in seconds
    search_timeout_seconds: float = 30.0
    extract_timeout_seconds: float = 30.0
    render_timeout_seconds: float = 25.0
    fetch_timeout_seconds: float = 20.0

    # Fan-out controls
    max_queries: int = 10
    item_timeout_seconds: float = 60.0  # 0 disables the per-item deadline

    # App
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = ""  # empty = console only

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def searxng_host(self) -> str:
        """SearXNG base URL with a scheme and without a trailing slash."""
        trimmed = (self.searxng_url or "").strip() or DEFAULT_SEARXNG_URL
        trimmed = trimmed.rstrip("/")
        if trimmed.lower().startswith(("http://", "https://")):
            return trimmed
        return f"http://{trimmed}"

    @property
    def render_endpoint(self) -> str:
        configured = (self.playwright_service_url or "").strip()
        return configured or DEFAULT_PLAYWRIGHT_SERVICE_URL


settings = Settings()
