from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///./data/db.sqlite3"
    data_dir: str = "./data"
    jwt_secret: str = "change-me"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 60 * 24
    db_timeout_seconds: float = 5.0
    public_cache_max_age: int = 60  # seconds
    seed_demo_data: bool = True
    cors_origins: list[str] = ["http://localhost:3000", "http://localhost:4321"]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
