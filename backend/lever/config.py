from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    CORS_ORIGINS: list[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"
    COMPOUND_PERIOD_DAYS: int = 30
    DAYS_PER_YEAR: int = 365
    MAX_SIMULATION_DAYS: int = 365 * 120
    DEFAULT_SNAPSHOT_INTERVAL: int = 1

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
