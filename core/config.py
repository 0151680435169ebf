from pydantic_settings import BaseSettings
from pydantic import ConfigDict

class Settings(BaseSettings):
    model_config = ConfigDict(env_file=".env")

    ENV: str = "development"

    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Session cookie
    SESSION_COOKIE_NAME: str = "session"
    SESSION_EXPIRE_DAYS: int = 7

    # Credential lifetimes
    VERIFICATION_CODE_EXPIRE_MINUTES: int = 30
    PASSWORD_RESET_EXPIRE_MINUTES: int = 60
    PASSWORD_HASH_ROUNDS: int = 16  # scrypt log2(N)

    ADMIN_REGISTRATION_CODE: str
    AUTH_RATE_LIMIT: str = "10 per 15 minutes"

    MAIL_USERNAME: str
    MAIL_PASSWORD: str
    MAIL_FROM: str
    MAIL_SERVER: str
    MAIL_PORT: int
    ADMIN_EMAIL: str
    FRONTEND_URL: str = "http://localhost:5173"

    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "logs"
    CORS_ORIGINS: list[str] = ["http://localhost:5173"]

    @property
    def SESSION_COOKIE_SECURE(self) -> bool:
        return self.ENV == "production"


settings = Settings()
