"""
Application configuration using environment variables.
"""
import os
from dataclasses import dataclass, field
from typing import List
from dotenv import load_dotenv

# Load .env file
load_dotenv()

@dataclass
class Settings:
    """Application settings."""
    APP_NAME: str = os.getenv("APP_NAME", "Nexus Due Diligence Engine")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # Per-check timeout in seconds (0 disables)
    CHECK_TIMEOUT_SECONDS: float = float(os.getenv("CHECK_TIMEOUT_SECONDS", "30"))

    # Simulated verification latency for the mock provider
    MOCK_DELAY_MIN_SECONDS: float = float(os.getenv("MOCK_DELAY_MIN_SECONDS", "1.5"))
    MOCK_DELAY_MAX_SECONDS: float = float(os.getenv("MOCK_DELAY_MAX_SECONDS", "3.5"))

    # Circuit breaker around the verification provider
    CIRCUIT_FAILURE_THRESHOLD: int = int(os.getenv("CIRCUIT_FAILURE_THRESHOLD", "5"))
    CIRCUIT_COOLDOWN_SECONDS: int = int(os.getenv("CIRCUIT_COOLDOWN_SECONDS", "60"))
    CIRCUIT_HALF_OPEN_MAX_CALLS: int = int(os.getenv("CIRCUIT_HALF_OPEN_MAX_CALLS", "3"))

    # CORS
    CORS_ORIGINS: List[str] = field(default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"])

settings = Settings()
