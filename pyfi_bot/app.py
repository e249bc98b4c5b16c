"""Process entry point: config, wiring, and the Discord connection."""

import logging
import sys
from typing import Optional

from pyfi_bot.adapters.discord.client import CommandBotClient
from pyfi_bot.adapters.remote.resolver import RemoteCommandResolver
from pyfi_bot.config import BotConfig, ConfigError
from pyfi_bot.domain.builtin_commands import register_builtin_commands
from pyfi_bot.domain.dispatcher import CommandDispatcher
from pyfi_bot.domain.registry import CommandRegistry

logger = logging.getLogger("pyfi_bot")

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def build_registry() -> CommandRegistry:
    registry = register_builtin_commands(CommandRegistry())
    registry.freeze()
    return registry


def build_client(config: BotConfig) -> CommandBotClient:
    """Wire registry, resolver and dispatcher into a Discord client."""
    registry = build_registry()
    resolver = RemoteCommandResolver(config.remote)
    if not resolver.is_configured:
        logger.info("Remote backend not configured, local commands only")
    if config.command_prefix:
        logger.warning(
            "Prefix commands enabled (%r): the Message Content intent must be "
            "enabled for this application in the Discord developer portal",
            config.command_prefix,
        )
    else:
        logger.info("Prefix commands disabled, slash commands only")
    dispatcher = CommandDispatcher(
        registry=registry,
        resolver=resolver,
        remote_commands=config.remote_commands,
    )
    return CommandBotClient(config, dispatcher, registry)


def main(config: Optional[BotConfig] = None) -> int:
    config = config or BotConfig.from_env()
    configure_logging(config.log_level)
    try:
        config.validate()
    except ConfigError as e:
        logger.error("%s", e)
        return 1

    client = build_client(config)
    logger.info("Connecting to Discord")
    client.run(config.discord_token, log_handler=None)
    return 0


if __name__ == "__main__":
    sys.exit(main())
