from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "postgresql://nutritrack_user:nutritrack_password@db:5432/nutritrack_db"
    DB_ECHO: bool = False
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT: int = 60
    # In production the schema should survive restarts
    RESET_DATABASE: bool = False
    INSTALL_STORED_ROUTINES: bool = True
    SEED_CATALOG: bool = True

    SECRET_KEY: str = "SECRET_KEY_FOR_NUTRITRACK"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    BCRYPT_ROUNDS: int = 12
    PASSWORD_MIN_LENGTH: int = 6

    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:3001",
        "http://127.0.0.1:3000",
    ]

    LOG_LEVEL: str = "INFO"
    APP_VERSION: str = "1.0.0"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "allow"


settings = Settings()
