"""Configuration loaded from the environment (.env supported)."""

__version__ = "0.1.0"

import logging
import os
from dataclasses import dataclass, field
from typing import FrozenSet, List, Optional

from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

DEFAULT_REMOTE_TIMEOUT_MS = 5000
DEFAULT_REMOTE_COMMANDS = frozenset({"weather"})
# Empty turns prefix commands off; a prefix needs the Message Content intent
DEFAULT_COMMAND_PREFIX = ""

# env var -> BotConfig attribute
REQUIRED_ENV = {
    "DISCORD_KEY": "discord_token",
    "CLIENT_ID": "client_id",
    "GUILD_ID": "guild_id",
}


class ConfigError(Exception):
    """Raised when required configuration is missing or malformed."""
    pass


def _parse_timeout(raw: Optional[str]) -> int:
    if raw is None or not raw.strip():
        return DEFAULT_REMOTE_TIMEOUT_MS
    try:
        value = int(raw)
    except ValueError:
        value = 0
    if value <= 0:
        logger.warning(
            "Invalid REMOTE_TIMEOUT_MS=%r, falling back to %d",
            raw, DEFAULT_REMOTE_TIMEOUT_MS,
        )
        return DEFAULT_REMOTE_TIMEOUT_MS
    return value


def _parse_command_set(raw: Optional[str]) -> FrozenSet[str]:
    if raw is None:
        return DEFAULT_REMOTE_COMMANDS
    return frozenset(n.strip().lower() for n in raw.split(",") if n.strip())


@dataclass
class RemoteConfig:
    url: str = ""
    api_key: str = ""
    timeout_ms: int = DEFAULT_REMOTE_TIMEOUT_MS

    @property
    def is_configured(self) -> bool:
        return bool(self.url and self.api_key)


@dataclass
class BotConfig:
    """Typed bot configuration."""

    discord_token: str = ""
    client_id: str = ""
    guild_id: str = ""
    command_prefix: str = DEFAULT_COMMAND_PREFIX
    remote_commands: FrozenSet[str] = DEFAULT_REMOTE_COMMANDS
    log_level: str = "INFO"
    remote: RemoteConfig = field(default_factory=RemoteConfig)

    @classmethod
    def from_env(cls) -> "BotConfig":
        """Create BotConfig from environment variables."""
        return cls(
            discord_token=os.getenv("DISCORD_KEY", "").strip(),
            client_id=os.getenv("CLIENT_ID", "").strip(),
            guild_id=os.getenv("GUILD_ID", "").strip(),
            command_prefix=os.getenv("COMMAND_PREFIX", DEFAULT_COMMAND_PREFIX).strip(),
            remote_commands=_parse_command_set(os.getenv("REMOTE_COMMANDS")),
            log_level=os.getenv("LOG_LEVEL", "INFO").strip().upper() or "INFO",
            remote=RemoteConfig(
                url=os.getenv("LAMBDA_URL", "").strip(),
                api_key=os.getenv("LAMBDA_APIKEY", "").strip(),
                timeout_ms=_parse_timeout(os.getenv("REMOTE_TIMEOUT_MS")),
            ),
        )

    def missing_required(self) -> List[str]:
        return [env for env, attr in REQUIRED_ENV.items() if not getattr(self, attr)]

    def validate(self) -> None:
        """Fail fast before any connection attempt."""
        missing = self.missing_required()
        if missing:
            raise ConfigError(
                f"Missing required environment variables: {', '.join(missing)}"
            )
        for env in ("CLIENT_ID", "GUILD_ID"):
            value = getattr(self, REQUIRED_ENV[env])
            if not value.isdigit():
                raise ConfigError(f"{env} must be a numeric Discord id, got {value!r}")

    @property
    def application_id(self) -> int:
        return int(self.client_id)

    @property
    def guild(self) -> int:
        return int(self.guild_id)
