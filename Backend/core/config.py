from pydantic_settings import BaseSettings
from typing import List, Optional
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


class Settings(BaseSettings):
    # API Settings
    api_host: str = "127.0.0.1"
    api_port: int = 5000
    api_prefix: str = "/api"
    cors_origins: List[str] = [
        "http://localhost:5173",
        "https://streaks-tracker.vercel.app",
    ]

    # MongoDB Settings
    mongodb_uri: str = os.getenv("MONGO_URI", "mongodb://localhost:27017")
    mongodb_database: str = os.getenv("MONGO_DATABASE", "momentum")
    mongodb_min_pool_size: int = 5
    mongodb_max_pool_size: int = 50
    mongodb_connect_timeout_ms: int = 15000
    mongodb_server_selection_timeout_ms: int = 15000
    mongodb_socket_timeout_ms: int = 15000
    mongodb_tls: bool = os.getenv("MONGO_TLS", "false").lower() == "true"
    mongodb_connect_retries: int = 3

    # App Settings
    debug: bool = False
    app_name: str = "Momentum"
    app_version: str = "2.0.0"

    # JWT Settings
    jwt_secret_key: str = os.getenv(
        "JWT_SECRET", "change-me-momentum-development-secret")
    jwt_algorithm: str = os.getenv("JWT_ALGORITHM", "HS256")
    access_token_expire_minutes: int = int(
        os.getenv("JWT_EXPIRY_DAYS", "30")) * 24 * 60  # Convert days to minutes
    bcrypt_rounds: int = int(os.getenv("BCRYPT_ROUNDS", "12"))

    # Logging Settings
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_dir: Optional[str] = os.getenv("LOG_DIR")

    # Habit / Heatmap Settings
    default_habit_color: str = "emerald"
    heatmap_months: int = 12

    # Client
    client_api_url: str = os.getenv("API_URL", "http://127.0.0.1:5000")
    client_session_file: str = os.path.join(
        os.path.expanduser("~"), ".momentum", "session.json")
    client_request_timeout_seconds: float = 10.0

    # Reminder loop (client side)
    reminder_interval_seconds: float = 60.0
    reminder_lead_minutes: int = 5
    reminder_evening_hours: List[int] = [20, 22]

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore",
        "env_prefix": "MOMENTUM_",
    }


settings = Settings()
