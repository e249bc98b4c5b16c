"""Tests for CommandDispatcher — resolution order and the one-reply rule."""

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from pyfi_bot.adapters.remote.resolver import RemoteCommandResolver
from pyfi_bot.config import RemoteConfig
from pyfi_bot.domain.builtin_commands import register_builtin_commands
from pyfi_bot.domain.dispatcher import (
    GENERIC_ERROR_MESSAGE,
    NO_OUTPUT_MESSAGE,
    UNKNOWN_COMMAND_MESSAGE,
    CommandDispatcher,
)
from pyfi_bot.domain.models import PlainText, StructuredEmbed
from pyfi_bot.domain.registry import CommandRegistry
from pyfi_bot.ports.inbound import Invocation
from pyfi_bot.ports.outbound import RemoteErrorKind, RemoteResult, ReplyState

PARIS = (
    "Paris: Temperature: 18.5°C, feels like: 17.2°C, wind: 3.4 m/s, "
    "humidity: 60%, pressure: 1012hPa, cloudiness: 40%"
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

class FakeReplyChannel:
    """Records replies and enforces the platform's reply rules."""

    def __init__(self, supports_ephemeral=True, fail_on_send=False):
        self.state = ReplyState.PENDING
        self.supports_ephemeral = supports_ephemeral
        self.fail_on_send = fail_on_send
        self.calls = []

    async def send(self, reply, ephemeral=False):
        assert self.state is ReplyState.PENDING, "second initial reply"
        if self.fail_on_send:
            raise RuntimeError("gateway closed")
        self.calls.append(("send", reply, ephemeral))
        self.state = ReplyState.SENT

    async def defer(self):
        assert self.state is ReplyState.PENDING
        self.calls.append(("defer", None, False))
        self.state = ReplyState.DEFERRED

    async def edit(self, reply):
        assert self.state is not ReplyState.PENDING, "edit before reply"
        self.calls.append(("edit", reply, False))
        self.state = ReplyState.SENT

    @property
    def terminal(self):
        """The single send/edit the user ends up seeing."""
        final = [c for c in self.calls if c[0] in ("send", "edit")]
        assert len(final) >= 1
        return final[-1]


def _resolver(result):
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(return_value=result)
    return resolver


def _dispatcher(resolver=None, registry=None, remote=("weather",)):
    registry = registry or register_builtin_commands(CommandRegistry())
    return CommandDispatcher(registry=registry, resolver=resolver, remote_commands=remote)


def _inv(name, *args):
    return Invocation(command_name=name, arguments=args, caller="alice")


# ---------------------------------------------------------------------------
# Remote-first resolution
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_remote_weather_renders_embed():
    resolver = _resolver(RemoteResult.success(PARIS))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)

    resolver.resolve.assert_awaited_once_with("weather", "Paris", "alice")
    assert [c[0] for c in channel.calls] == ["defer", "edit"]
    reply = channel.terminal[1]
    assert isinstance(reply, StructuredEmbed)
    assert "Paris" in reply.title


@pytest.mark.asyncio
async def test_defer_happens_before_remote_call():
    channel = FakeReplyChannel()
    resolver = AsyncMock()

    async def resolve(command, args, user):
        assert channel.state is ReplyState.DEFERRED
        return RemoteResult.success("ok")

    resolver.resolve = resolve
    await _dispatcher(resolver, remote=("joke",)).dispatch(_inv("joke"), channel)
    assert channel.terminal == ("edit", PlainText("ok"), False)


@pytest.mark.asyncio
async def test_remote_plain_text_result():
    resolver = _resolver(RemoteResult.success("Why did the chicken..."))
    channel = FakeReplyChannel()
    await _dispatcher(resolver, remote=("joke",)).dispatch(_inv("joke"), channel)
    assert channel.terminal == ("edit", PlainText("Why did the chicken..."), False)


@pytest.mark.asyncio
async def test_remote_unparseable_weather():
    resolver = _resolver(RemoteResult.success("cloudy, probably"))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)
    assert channel.terminal == ("edit", PlainText("Sorry, couldn't parse the weather data."), False)


@pytest.mark.asyncio
async def test_remote_empty_result_never_sends_empty_message(caplog):
    resolver = _resolver(RemoteResult.success(""))
    channel = FakeReplyChannel()
    with caplog.at_level(logging.WARNING):
        await _dispatcher(resolver, remote=("joke",)).dispatch(_inv("joke"), channel)
    assert channel.terminal == ("edit", PlainText(NO_OUTPUT_MESSAGE), False)
    assert "empty result" in caplog.text


@pytest.mark.parametrize("kind", [RemoteErrorKind.NOT_CONFIGURED, RemoteErrorKind.NOT_FOUND])
@pytest.mark.asyncio
async def test_fallback_to_local_on_not_configured_or_not_found(kind):
    resolver = _resolver(RemoteResult.error(kind))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)

    assert [c[0] for c in channel.calls] == ["defer", "edit"]
    assert channel.terminal[1] == PlainText(
        'Weather backend is unavailable right now for "Paris".'
    )


@pytest.mark.asyncio
async def test_sentinel_success_is_treated_as_not_found():
    # Even if a resolver reports the sentinel as success, it is not definitive
    resolver = _resolver(RemoteResult.success("Unknown command: foo"))
    channel = FakeReplyChannel()
    await _dispatcher(resolver, remote=("foo",)).dispatch(_inv("foo"), channel)
    assert channel.terminal == ("edit", PlainText(UNKNOWN_COMMAND_MESSAGE), False)


@pytest.mark.asyncio
async def test_unknown_on_both_sides():
    resolver = _resolver(
        RemoteResult.error(RemoteErrorKind.NOT_FOUND, text="Unknown command: foo")
    )
    channel = FakeReplyChannel()
    await _dispatcher(resolver, remote=("foo",)).dispatch(_inv("foo"), channel)
    assert channel.terminal[1] == PlainText(UNKNOWN_COMMAND_MESSAGE)
    assert len([c for c in channel.calls if c[0] == "send"]) == 0


@pytest.mark.parametrize("kind", [RemoteErrorKind.TRANSPORT, RemoteErrorKind.BACKEND])
@pytest.mark.asyncio
async def test_transport_error_falls_back_with_warning(kind, caplog):
    resolver = _resolver(RemoteResult.error(kind, "TimeoutError: "))
    channel = FakeReplyChannel()
    with caplog.at_level(logging.WARNING):
        await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)

    assert "falling back" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)
    assert "Weather backend is unavailable" in channel.terminal[1].content


@pytest.mark.asyncio
async def test_configured_backend_timeout_does_not_claim_unconfigured():
    resolver = RemoteCommandResolver(
        RemoteConfig(url="https://backend.example/run", api_key="k", timeout_ms=100)
    )
    session_cls = MagicMock()
    session_cls.return_value.__aenter__ = AsyncMock(side_effect=asyncio.TimeoutError())
    session_cls.return_value.__aexit__ = AsyncMock(return_value=False)
    channel = FakeReplyChannel()
    with patch("pyfi_bot.adapters.remote.resolver.aiohttp.ClientSession", session_cls):
        await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)

    session_cls.assert_called_once()

    assert [c[0] for c in channel.calls] == ["defer", "edit"]
    text = channel.terminal[1].content
    assert "not configured" not in text
    assert text == 'Weather backend is unavailable right now for "Paris".'


@pytest.mark.asyncio
async def test_resolver_exception_gives_generic_error():
    resolver = AsyncMock()
    resolver.resolve = AsyncMock(side_effect=RuntimeError("boom"))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("weather", "Paris"), channel)
    # deferred already → error arrives as an edit
    assert channel.terminal == ("edit", PlainText(GENERIC_ERROR_MESSAGE), False)


@pytest.mark.asyncio
async def test_no_resolver_means_local_only():
    channel = FakeReplyChannel()
    await _dispatcher(resolver=None).dispatch(_inv("weather", "Paris"), channel)
    assert [c[0] for c in channel.calls] == ["send"]


# ---------------------------------------------------------------------------
# Local resolution
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_local_command_not_sent_to_remote():
    resolver = _resolver(RemoteResult.success("should not be used"))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("ping"), channel)
    resolver.resolve.assert_not_awaited()
    assert channel.calls == [("send", PlainText("Pong!"), False)]


@pytest.mark.asyncio
async def test_unknown_command_is_ephemeral_single_reply():
    channel = FakeReplyChannel()
    await _dispatcher().dispatch(_inv("nope"), channel)
    assert channel.calls == [("send", PlainText(UNKNOWN_COMMAND_MESSAGE), True)]


@pytest.mark.asyncio
async def test_unknown_command_without_ephemeral_support():
    channel = FakeReplyChannel(supports_ephemeral=False)
    await _dispatcher().dispatch(_inv("nope"), channel)
    assert channel.calls == [("send", PlainText(UNKNOWN_COMMAND_MESSAGE), False)]


@pytest.mark.asyncio
async def test_handler_exception_before_reply(caplog):
    registry = CommandRegistry()

    async def broken(invocation, channel):
        raise ValueError("bad input")

    registry.register("broken", broken)
    channel = FakeReplyChannel()
    with caplog.at_level(logging.ERROR):
        await _dispatcher(registry=registry).dispatch(_inv("broken"), channel)

    assert channel.calls == [("send", PlainText(GENERIC_ERROR_MESSAGE), True)]
    assert "bad input" in caplog.text


@pytest.mark.asyncio
async def test_handler_exception_after_defer_edits():
    registry = CommandRegistry()

    async def slow_then_broken(invocation, channel):
        await channel.defer()
        raise ValueError("late failure")

    registry.register("slow", slow_then_broken)
    channel = FakeReplyChannel()
    await _dispatcher(registry=registry).dispatch(_inv("slow"), channel)
    assert channel.calls[-1] == ("edit", PlainText(GENERIC_ERROR_MESSAGE), False)
    assert len([c for c in channel.calls if c[0] == "send"]) == 0


@pytest.mark.asyncio
async def test_handler_that_never_replies_gets_a_reply():
    registry = CommandRegistry()

    async def silent(invocation, channel):
        pass

    registry.register("silent", silent)
    channel = FakeReplyChannel()
    await _dispatcher(registry=registry).dispatch(_inv("silent"), channel)
    assert channel.calls == [("send", PlainText(NO_OUTPUT_MESSAGE), False)]


@pytest.mark.asyncio
async def test_failure_while_reporting_error_is_contained(caplog):
    channel = FakeReplyChannel(fail_on_send=True)
    with caplog.at_level(logging.ERROR):
        await _dispatcher().dispatch(_inv("ping"), channel)
    assert "could not deliver error reply" in caplog.text


@pytest.mark.asyncio
async def test_command_name_case_insensitive():
    resolver = _resolver(RemoteResult.success(PARIS))
    channel = FakeReplyChannel()
    await _dispatcher(resolver).dispatch(_inv("Weather", "Paris"), channel)
    resolver.resolve.assert_awaited_once_with("weather", "Paris", "alice")


def test_is_remote():
    d = _dispatcher(_resolver(RemoteResult.success("x")), remote=("Weather",))
    assert d.is_remote("weather") is True
    assert d.is_remote("ping") is False
    assert _dispatcher(None).is_remote("weather") is False
