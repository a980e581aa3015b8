import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()


@dataclass(frozen=True)
class Settings:
    sandbox: str = "playwright"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    serverless: bool = False


def get_settings() -> Settings:
    """Read settings for the outer surfaces (HTTP app, server). The extraction
    core itself takes no environment input."""
    return Settings(
        sandbox=os.getenv("PLYRLINK_SANDBOX", "playwright"),
        log_level=os.getenv("PLYRLINK_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "3000")),
        serverless=bool(os.getenv("VERCEL")),
    )
