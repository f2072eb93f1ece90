"""ClipConnect Server Configuration."""

from pathlib import Path
from typing import Literal, Optional

from pydantic import model_validator
from pydantic_settings import BaseSettings

# No 0/O or 1/I: codes are read aloud and typed by hand
UNAMBIGUOUS_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ23456789"

DEFAULT_MAX_ATTEMPTS = {
    "check_then_insert": 10,
    "insert_detect_conflict": 5,
}


class Settings(BaseSettings):
    # Server
    server_name: str = "ClipConnect API"
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False
    log_level: str = "INFO"

    # Storage
    data_dir: Path = Path.home() / "clipconnect" / "data"
    database_url: str = ""  # empty -> sqlite file in data_dir

    # Sessions
    session_mode: Literal["key", "roster"] = "key"
    code_strategy: Literal["check_then_insert", "insert_detect_conflict"] = "check_then_insert"
    code_length: int = 6
    code_alphabet: str = UNAMBIGUOUS_ALPHABET
    code_max_attempts: Optional[int] = None
    key_bytes: int = 32

    # Relay
    sync_requires_session: bool = False

    # HTTP
    cors_origins: list[str] = ["*"]
    rate_limit_per_minute: int = 100  # 0 disables
    rate_limit_burst: int = 20
    trusted_proxies: list[str] = []  # peers whose X-Forwarded-For is honored

    model_config = {"env_prefix": "CLIPCONNECT_", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_codes(self) -> "Settings":
        if self.code_length < 1:
            raise ValueError("code_length must be positive")
        if len(set(self.code_alphabet)) < 2:
            raise ValueError("code_alphabet needs at least two distinct characters")
        if self.code_alphabet != self.code_alphabet.upper():
            raise ValueError("code_alphabet must be upper-case")
        if self.code_max_attempts is not None and self.code_max_attempts < 1:
            raise ValueError("code_max_attempts must be at least 1")
        return self

    @property
    def max_code_attempts(self) -> int:
        """Attempt bound for the active uniqueness strategy."""
        if self.code_max_attempts is not None:
            return self.code_max_attempts
        return DEFAULT_MAX_ATTEMPTS[self.code_strategy]

    @property
    def issues_keys(self) -> bool:
        return self.session_mode == "key"

    @property
    def tracks_devices(self) -> bool:
        return self.session_mode == "roster"

    @property
    def sqlalchemy_url(self) -> str:
        if self.database_url:
            return self.database_url
        return f"sqlite:///{self.data_dir / 'clipconnect.db'}"

    def ensure_dirs(self) -> None:
        """Create the data directory when the default SQLite file is used."""
        if not self.database_url:
            self.data_dir.mkdir(parents=True, exist_ok=True)


settings = Settings()
settings.ensure_dirs()
