"""ReplyChannel implementations on top of discord.py."""

from typing import Any, Dict, Optional

import discord

from pyfi_bot.domain.formatter import truncate_text
from pyfi_bot.domain.models import FormattedReply, StructuredEmbed
from pyfi_bot.ports.outbound import ReplyState

PLACEHOLDER_TEXT = "Working on it..."


def to_discord_embed(embed: StructuredEmbed) -> discord.Embed:
    result = discord.Embed(
        title=embed.title,
        color=embed.color,
        timestamp=embed.timestamp,
    )
    for f in embed.fields:
        result.add_field(name=f.name, value=f.value, inline=f.inline)
    if embed.footer:
        result.set_footer(text=embed.footer)
    return result


def _message_kwargs(reply: FormattedReply) -> Dict[str, Any]:
    """Full content/embed pair, so an edit replaces whatever was there."""
    if isinstance(reply, StructuredEmbed):
        return {"content": None, "embed": to_discord_embed(reply)}
    return {"content": truncate_text(reply.content), "embed": None}


class InteractionReplyChannel:
    """ReplyChannel for slash commands (discord.Interaction)."""

    def __init__(self, interaction: discord.Interaction):
        self._interaction = interaction
        self._state = ReplyState.PENDING

    @property
    def state(self) -> ReplyState:
        return self._state

    @property
    def supports_ephemeral(self) -> bool:
        return True

    async def send(self, reply: FormattedReply, ephemeral: bool = False) -> None:
        kwargs = {k: v for k, v in _message_kwargs(reply).items() if v is not None}
        await self._interaction.response.send_message(ephemeral=ephemeral, **kwargs)
        self._state = ReplyState.SENT

    async def defer(self) -> None:
        if self._state is not ReplyState.PENDING:
            return
        await self._interaction.response.defer(thinking=True)
        self._state = ReplyState.DEFERRED

    async def edit(self, reply: FormattedReply) -> None:
        await self._interaction.edit_original_response(**_message_kwargs(reply))
        self._state = ReplyState.SENT


class MessageReplyChannel:
    """ReplyChannel for prefix commands typed as chat messages.

    Deferring posts a placeholder message which the final reply edits.
    """

    def __init__(self, message: discord.Message):
        self._message = message
        self._sent: Optional[discord.Message] = None
        self._state = ReplyState.PENDING

    @property
    def state(self) -> ReplyState:
        return self._state

    @property
    def supports_ephemeral(self) -> bool:
        return False

    async def send(self, reply: FormattedReply, ephemeral: bool = False) -> None:
        self._sent = await self._message.reply(**_message_kwargs(reply))
        self._state = ReplyState.SENT

    async def defer(self) -> None:
        if self._state is not ReplyState.PENDING:
            return
        self._sent = await self._message.reply(PLACEHOLDER_TEXT)
        self._state = ReplyState.DEFERRED

    async def edit(self, reply: FormattedReply) -> None:
        if self._sent is None:
            await self.send(reply)
            return
        await self._sent.edit(**_message_kwargs(reply))
        self._state = ReplyState.SENT
