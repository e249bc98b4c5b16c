"""Discord client — turns slash commands and prefixed messages into invocations.

Session management, gateway handling and command sync are discord.py's job;
this module only builds Invocations and hands them to CommandDispatcher.
"""

import logging
from typing import Tuple

import discord
from discord import app_commands

from pyfi_bot.adapters.discord.reply_channel import (
    InteractionReplyChannel,
    MessageReplyChannel,
)
from pyfi_bot.config import BotConfig
from pyfi_bot.domain.command_parser import parse_prefixed
from pyfi_bot.domain.dispatcher import CommandDispatcher
from pyfi_bot.domain.registry import CommandRegistry
from pyfi_bot.ports.inbound import Invocation

logger = logging.getLogger(__name__)


class CommandBotClient(discord.Client):
    """Discord bot answering /weather, /help, /ping and prefixed commands."""

    def __init__(
        self,
        config: BotConfig,
        dispatcher: CommandDispatcher,
        registry: CommandRegistry,
        **discord_kwargs,
    ):
        intents = discord.Intents.default()
        intents.message_content = bool(config.command_prefix)
        super().__init__(
            intents=intents,
            application_id=config.application_id,
            **discord_kwargs,
        )
        self._config = config
        self._dispatcher = dispatcher
        self._registry = registry
        self.tree = app_commands.CommandTree(self)
        self._register_slash_commands()

    def _register_slash_commands(self) -> None:
        @self.tree.command(name="weather", description="Get weather for a location")
        @app_commands.describe(location="The city to get weather for")
        async def weather(interaction: discord.Interaction, location: str):
            await self.dispatch_interaction(interaction, "weather", (location,))

        @self.tree.command(name="help", description="Shows all available commands")
        async def show_help(interaction: discord.Interaction):
            await self.dispatch_interaction(interaction, "help")

        @self.tree.command(name="ping", description="Check that the bot is responding")
        async def ping(interaction: discord.Interaction):
            await self.dispatch_interaction(interaction, "ping")

    async def setup_hook(self) -> None:
        guild = discord.Object(id=self._config.guild)
        self.tree.copy_global_to(guild=guild)
        logger.info("Started refreshing guild (/) commands.")
        try:
            synced = await self.tree.sync(guild=guild)
        except discord.DiscordException:
            logger.exception("Error registering commands")
            return
        logger.info("Successfully reloaded %d guild (/) commands.", len(synced))

    async def on_ready(self):
        logger.info("Logged in as %s", self.user)

    async def dispatch_interaction(
        self,
        interaction: discord.Interaction,
        command_name: str,
        arguments: Tuple[str, ...] = (),
    ) -> None:
        invocation = Invocation(
            command_name=command_name,
            arguments=arguments,
            caller=interaction.user.name,
        )
        await self._dispatcher.dispatch(invocation, InteractionReplyChannel(interaction))

    async def on_message(self, message: discord.Message):
        # Guard: self.user can be None before on_ready fires
        if not self.user or message.author == self.user or message.author.bot:
            return

        invocation = parse_prefixed(
            message.content,
            self._config.command_prefix,
            message.author.name,
            self._registry.arg_shape,
        )
        if invocation is None:
            return

        logger.debug("prefix command %r from %s", invocation.command_name, invocation.caller)
        await self._dispatcher.dispatch(invocation, MessageReplyChannel(message))
