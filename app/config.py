from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/fleet.sqlite3"
    api_key: str = ""  # empty = no auth check (local dev)
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    maintenance_capacity_ratio: float = 0.05
    seed_on_startup: bool = True
    seed_file: str = ""  # empty = built-in seed vehicles

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
