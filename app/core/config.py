from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Plant Care Service"
    app_env: str = "development"
    app_version: str = "1.0.0"
    log_level: str = "INFO"

    # OpenAI key is optional so the app can still start and serve /interpret-response
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    # OpenRouter (hosted) key, used only when no OpenAI key is set
    openrouter_api_key: str | None = None
    openrouter_model: str | None = None

    max_tokens: int = 1000
    temperature: float = 0.7
    request_timeout: float = 30.0

    cors_origins: list[str] = ["*"]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
