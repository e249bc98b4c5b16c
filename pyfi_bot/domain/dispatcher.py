"""CommandDispatcher — decides where each command is resolved.

No framework dependencies: the remote backend and the reply channel are
reached through ports, so the whole pipeline is testable with fakes.
"""

import logging
from typing import Iterable, Optional

from pyfi_bot.domain.formatter import format_result
from pyfi_bot.domain.models import PlainText
from pyfi_bot.domain.registry import CommandRegistry
from pyfi_bot.ports.inbound import Invocation
from pyfi_bot.ports.outbound import (
    RemoteErrorKind,
    RemoteResolverPort,
    ReplyChannel,
    ReplyState,
    respond,
)

logger = logging.getLogger(__name__)

UNKNOWN_COMMAND_MESSAGE = "Unknown command."
GENERIC_ERROR_MESSAGE = "An error occurred while executing the command."
NO_OUTPUT_MESSAGE = "The command finished without any output."


class CommandDispatcher:
    """Resolves one invocation into exactly one reply.

    Handles:
    - Remote-first resolution for designated commands (deferred reply)
    - Fallback to the local registry on NotConfigured / NotFound / errors
    - Unknown-command notice when nothing resolves
    - Error containment: nothing raised past dispatch()
    """

    def __init__(
        self,
        registry: CommandRegistry,
        resolver: Optional[RemoteResolverPort] = None,
        remote_commands: Iterable[str] = (),
    ):
        self._registry = registry
        self._resolver = resolver
        self._remote_commands = frozenset(n.lower() for n in remote_commands)

    @property
    def remote_commands(self) -> frozenset:
        return self._remote_commands

    def is_remote(self, command_name: str) -> bool:
        return self._resolver is not None and command_name.lower() in self._remote_commands

    async def dispatch(self, invocation: Invocation, channel: ReplyChannel) -> None:
        command = invocation.command_name.lower()
        try:
            if self.is_remote(command) and await self._try_remote(command, invocation, channel):
                return
            await self._run_local(command, invocation, channel)
        except Exception:
            logger.exception("[%s] error executing command", command)
            await self._reply_failure(command, channel)

    async def _try_remote(
        self, command: str, invocation: Invocation, channel: ReplyChannel
    ) -> bool:
        """Returns True when the backend produced the reply."""
        await channel.defer()
        args = invocation.argument_string
        logger.debug("[%s] remote call with arguments %r", command, args)

        result = await self._resolver.resolve(command, args, invocation.caller)

        if result.is_definitive:
            reply = format_result(command, result.result_text)
            if reply is None:
                reply = PlainText(NO_OUTPUT_MESSAGE)
            await respond(channel, reply)
            return True

        kind = result.error_kind
        if kind is RemoteErrorKind.NOT_CONFIGURED:
            logger.info("[%s] remote backend not configured, falling back to local commands", command)
        elif kind is RemoteErrorKind.NOT_FOUND or kind is None:
            logger.info("[%s] not handled by remote backend, falling back to local commands", command)
        else:
            logger.warning(
                "[%s] remote backend failed (%s: %s), falling back to local commands",
                command, kind.value, result.detail,
            )
        return False

    async def _run_local(self, command: str, invocation: Invocation, channel: ReplyChannel) -> None:
        registration = self._registry.lookup(command)
        if registration is None:
            logger.info("[%s] unknown command from %s", command, invocation.caller)
            await respond(channel, PlainText(UNKNOWN_COMMAND_MESSAGE), ephemeral=True)
            return

        await registration.handler(invocation, channel)

        if channel.state is not ReplyState.SENT:
            logger.warning("[%s] handler finished without replying", command)
            await respond(channel, PlainText(NO_OUTPUT_MESSAGE))

    async def _reply_failure(self, command: str, channel: ReplyChannel) -> None:
        try:
            await respond(channel, PlainText(GENERIC_ERROR_MESSAGE), ephemeral=True)
        except Exception:
            logger.exception("[%s] could not deliver error reply", command)
