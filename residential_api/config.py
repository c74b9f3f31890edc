"""
Configuration Management

Centralized configuration management using environment variables
with proper validation and type safety.
"""

import os
from typing import List, Optional
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv


# Load environment variables from .env in project root (resolve to absolute path)
_project_root = Path(__file__).resolve().parent.parent
_env_path = _project_root / ".env"
if _env_path.exists():
    load_dotenv(dotenv_path=str(_env_path))
else:
    # Also load from current working directory so "python backend_server.py" picks up .env
    load_dotenv()


@dataclass
class MongoConfig:
    """MongoDB configuration"""
    uri: str
    db_name: Optional[str] = None  # Database name; if unset, uses 'residential'


@dataclass
class AuthConfig:
    """JWT and password hashing configuration"""
    jwt_secret: str
    jwt_expiration_hours: int = 168  # 7 days
    bcrypt_rounds: int = 12


@dataclass
class RateLimitConfig:
    """Per-IP request limits (slowapi limit strings)"""
    enabled: bool = True
    default: str = "100/15minutes"
    login: str = "15/minute"


@dataclass
class ServerConfig:
    """HTTP server configuration"""
    host: str
    port: int
    environment: str = "development"
    cors_origins: List[str] = field(default_factory=lambda: ["*"])


@dataclass
class Config:
    """Main application configuration"""

    # MongoDB configuration
    mongo: MongoConfig

    # JWT / bcrypt
    auth: AuthConfig

    # Server configuration
    server: ServerConfig

    # Rate limiting
    rate_limit: RateLimitConfig

    # Community local time zone, used for "today" and QR validity windows
    APP_TIMEZONE: str = "UTC"

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FORMAT: str = os.getenv(
        "LOG_FORMAT",
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    @property
    def is_production(self) -> bool:
        return self.server.environment == "production"

    @classmethod
    def from_env(cls) -> "Config":
        """
        Create configuration from environment variables.

        Returns:
            Configured Config instance

        Raises:
            ValueError: If required environment variables are missing
        """
        mongodb_uri = os.getenv("MONGODB_URI")
        if not mongodb_uri:
            raise ValueError("MONGODB_URI environment variable is required")

        jwt_secret = os.getenv("JWT_SECRET_KEY")
        if not jwt_secret or not jwt_secret.strip():
            raise ValueError(
                "JWT_SECRET_KEY environment variable is required. "
                "Generate a secret (e.g. openssl rand -hex 32) and set it in .env"
            )

        cors_origins = [
            o.strip().rstrip("/")
            for o in os.getenv("CORS_ORIGINS", "*").split(",")
            if o.strip()
        ]

        return cls(
            mongo=MongoConfig(
                uri=mongodb_uri,
                db_name=os.getenv("MONGODB_DB_NAME") or None,
            ),
            auth=AuthConfig(
                jwt_secret=jwt_secret,
                jwt_expiration_hours=int(os.getenv("JWT_EXPIRATION_HOURS", "168")),
                bcrypt_rounds=int(os.getenv("BCRYPT_ROUNDS", "12")),
            ),
            server=ServerConfig(
                host=os.getenv("SERVER_HOST", "0.0.0.0"),
                port=int(os.getenv("SERVER_PORT", "3001")),
                environment=os.getenv("ENVIRONMENT", "development"),
                cors_origins=cors_origins or ["*"],
            ),
            rate_limit=RateLimitConfig(
                enabled=os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true",
                default=os.getenv("RATE_LIMIT_DEFAULT", "100/15minutes"),
                login=os.getenv("RATE_LIMIT_LOGIN", "15/minute"),
            ),
            APP_TIMEZONE=os.getenv("APP_TIMEZONE", "UTC"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )


def get_config() -> Config:
    """
    Get configuration from environment variables.

    Returns:
        Configuration instance
    """
    return Config.from_env()
