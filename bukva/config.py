from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ======================
    # Database
    # ======================
    DATABASE_URL: str = "sqlite:///./data/app.db"

    # =========
    # App
    # =========
    APP_NAME: str = "Bukva YOU"
    DEBUG: bool = False
    FRONTEND_URL: str = "*"

    # =========
    # JWT
    # =========
    JWT_SECRET_KEY: str = "dev_secret_change_me"
    JWT_ALGORITHM: str = "HS256"
    JWT_ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24 * 7

    # =========
    # Seed data
    # =========
    EXERCISES_PATH: str = "exercises.json"
    SEED_ON_STARTUP: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
