from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # OpenRouter
    openrouter_api_key: str = ""
    openrouter_base_url: str = "https://openrouter.ai/api/v1"
    default_model: str = "google/gemini-2.0-flash-001"
    openrouter_model: str = ""  # optional override for every pipeline call
    completion_timeout_seconds: float = 60.0

    # Search provider
    search_provider: str = "tavily"  # tavily | serpapi
    tavily_api_key: str = ""
    serpapi_api_key: str = ""
    search_timeout_seconds: float = 30.0

    # Page fetching
    fetch_provider: str = "direct"  # direct | scrapingant | jina_reader
    scrapingant_api_key: str = ""
    jina_reader_base_url: str = "https://r.jina.ai"
    fetch_timeout_seconds: float = 20.0
    fetch_retry_max: int = 1

    # Pipeline bounds
    max_queries: int = 5
    max_sources: int = 5
    min_paragraph_chars: int = 50
    extraction_char_budget: int = 8000
    bullet_min_chars: int = 3
    loose_line_min_chars: int = 20

    # Completion parameters per stage
    query_temperature: float = 0.7
    query_max_tokens: int = 200
    extraction_temperature: float = 0.3
    extraction_max_tokens: int = 2000
    synthesis_temperature: float = 0.7
    synthesis_max_tokens: int = 16000
    synthesis_fallback_text: str = "Unable to generate summary."

    # Prompt catalog override (empty = packaged prompts.json)
    prompts_path: str = ""

    # App
    cors_origins: str = "http://localhost:3000"
    app_log_level: str = "INFO"
    noisy_log_level: str = "WARNING"
    log_dir: str = "logs"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]


settings = Settings()
