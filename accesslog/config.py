# accesslog/config.py
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # Access line layout
    FORMAT: Literal["combined", "common", "dev", "short", "tiny"] = "combined"

    # Where access lines go; persistence and rotation belong to the collector
    SINK: Literal["stdout", "stderr"] = "stdout"

    # In-process counters/gauges/histograms exposed by the demo /metrics route
    METRICS_ENABLED: bool = True

    # Diagnostic events (swallowed sink/metrics failures)
    DIAGNOSTIC_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="ACCESSLOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
