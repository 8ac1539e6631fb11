from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    app_name: str = "VegMenu"
    environment: str = "local"
    log_level: str = "INFO"
    retry_max_attempts: int = 4
    retry_backoff_initial: float = 0.5
    retry_backoff_max: float = 8.0
    api_rate_limit: str = "30/minute"
    max_text_length: int = 20000
    max_items_per_request: int = 200
    sentry_dsn: str | None = None
    sentry_environment: str | None = None

    openai_api_key: str | None = None
    llm_timeout: float = 30.0

    # OCR cleanup settings
    llm_cleanup_model: str = "gpt-4o-mini"
    llm_cleanup_enabled: bool = True

    # Classification settings
    llm_classify_model: str = "gpt-4o-mini"
    review_confidence_threshold: float = 0.7

    # Ingredient knowledge base settings
    qdrant_url: str = "http://localhost:6333"
    qdrant_api_key: str | None = None
    qdrant_timeout: float = 10.0
    ingredient_collection: str = "ingredients"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    rag_top_k: int = 3
    rag_score_threshold: float = 0.2


settings = Settings()
