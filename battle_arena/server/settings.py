"""Application settings loaded from environment variables."""
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application configuration settings.

    세 개의 서비스(auth, profile, leaderboard)가 같은 설정 클래스를 공유하며,
    SERVICE_NAME 으로 어떤 라우터를 노출할지 결정합니다.
    """

    # Service selection: "auth", "profile", "leaderboard"
    SERVICE_NAME: str = "auth"

    # Server Configuration
    SERVER_HOST: str = "0.0.0.0"
    SERVER_PORT: int = 8081

    # MongoDB
    MONGO_URI: str = "mongodb://localhost:27017"
    MONGO_DATABASE: str = "battlearena"
    MONGO_SERVER_SELECTION_TIMEOUT_MS: int = 5000

    # JWT (모든 서비스가 같은 secret 을 공유해야 토큰 검증 가능)
    JWT_SECRET: str = "your-256-bit-secret-key-change-this-in-production-minimum-32-characters"
    JWT_EXPIRATION: int = 86400000  # milliseconds
    JWT_ALGORITHM: str = "HS256"

    # Password hashing
    BCRYPT_ROUNDS: int = 12

    # CORS
    CORS_ALLOWED_ORIGINS: str = "*"
    CORS_MAX_AGE: int = 3600

    # Logging / docs
    LOG_LEVEL: str = "INFO"
    ENABLE_DOCS: bool = True

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS_ALLOWED_ORIGINS ("*" or comma-separated)."""
        if self.CORS_ALLOWED_ORIGINS.strip() == "*":
            return ["*"]
        return [
            origin.strip()
            for origin in self.CORS_ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]


settings = Settings()
