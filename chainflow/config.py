import os
from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    BOT_TOKEN: str = os.getenv("BOT_TOKEN", "")

    LOG_FILE: str = os.getenv("LOG_FILE", "logs/chainflow.log")
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()

    # One asyncio.Lock per recipient around every update
    SERIALIZE_UPDATES: bool = _flag("SERIALIZE_UPDATES", "1")

    # Runtime sanity‑checks (only the bot entry point needs a token)
    def validate(self):
        missing = [k for k in ("BOT_TOKEN",) if getattr(self, k) in (None, "")]
        if missing:
            raise RuntimeError(f"Missing required settings: {missing}")

settings = Settings()
