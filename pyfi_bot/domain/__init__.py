"""Domain layer — pure Python, no framework dependencies."""

from pyfi_bot.domain.models import (
    EmbedField,
    FormattedReply,
    PlainText,
    StructuredEmbed,
    WeatherReport,
)
from pyfi_bot.domain.formatter import format_result, parse_weather, weather_embed
from pyfi_bot.domain.registry import CommandRegistration, CommandRegistry, RegistryError
from pyfi_bot.domain.command_parser import parse_prefixed
from pyfi_bot.domain.builtin_commands import register_builtin_commands
from pyfi_bot.domain.dispatcher import CommandDispatcher

__all__ = [
    "EmbedField",
    "FormattedReply",
    "PlainText",
    "StructuredEmbed",
    "WeatherReport",
    "format_result",
    "parse_weather",
    "weather_embed",
    "CommandRegistration",
    "CommandRegistry",
    "RegistryError",
    "parse_prefixed",
    "register_builtin_commands",
    "CommandDispatcher",
]
