from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(case_sensitive=True)

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    ENVIRONMENT: str = "dev"
    APP_VERSION: str = "1.0.0"

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FILE_PATH: str = "logs/logging_errors.log"
    LOG_EXCLUDED_PATHS: list[str] = ["/metrics", "/health"]

    # Loki settings
    LOKI_ENABLED: bool = False
    LOKI_URL: str = "http://loki:3100"
    LOKI_VERSION: str = "1"

    # WebSocket relay settings
    WS_PATH: str = "/"
    WS_SEND_TIMEOUT_SECONDS: float = 5.0

    # Simulated operation behind /api/async_test
    ASYNC_OPERATION_DELAY_SECONDS: float = 1.0

    # Cities proxy settings
    CITIES_URL: str = (
        "https://raw.githubusercontent.com/lutangar/cities.json/master/cities.json"
    )
    CITIES_LIMIT: int = 10
    CITIES_FETCH_TIMEOUT_SECONDS: float = 5.0


app_settings = Settings()
