from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    storage_backend: Literal["sql", "file", "memory"] = "sql"
    database_url: str = "sqlite:///drivelog.sqlite3"
    data_dir: str = ".drivelog"
    storage_key: str = "vehicleLogs"
    export_dir: str = "exports"
    timer_tick_ms: int = 100
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8050
    debug: bool = False

    class Config:
        env_prefix = "DRIVELOG_"
        env_file = ".env"
        extra = "ignore"


settings = Settings()
