"""Discord adapter — discord.py client and reply channels."""

from pyfi_bot.adapters.discord.client import CommandBotClient
from pyfi_bot.adapters.discord.reply_channel import (
    InteractionReplyChannel,
    MessageReplyChannel,
    to_discord_embed,
)

__all__ = [
    "CommandBotClient",
    "InteractionReplyChannel",
    "MessageReplyChannel",
    "to_discord_embed",
]
