"""PyFi bot — Discord command front-end for a remote command backend."""

from pyfi_bot.config import __version__, BotConfig, ConfigError, RemoteConfig
from pyfi_bot.domain.dispatcher import CommandDispatcher
from pyfi_bot.domain.registry import CommandRegistry
from pyfi_bot.adapters.remote.resolver import RemoteCommandResolver
from pyfi_bot.ports.inbound import Invocation
from pyfi_bot.ports.outbound import RemoteResult, ReplyChannel

__all__ = [
    "__version__",
    "BotConfig",
    "ConfigError",
    "RemoteConfig",
    "CommandDispatcher",
    "CommandRegistry",
    "RemoteCommandResolver",
    "Invocation",
    "RemoteResult",
    "ReplyChannel",
]
