"""Remote command backend client using aiohttp."""

import logging
from typing import Optional

import aiohttp

from pyfi_bot.config import RemoteConfig
from pyfi_bot.ports.outbound import (
    UNKNOWN_COMMAND_SENTINEL,
    RemoteErrorKind,
    RemoteResult,
)

logger = logging.getLogger(__name__)

API_KEY_HEADER = "x-api-key"


class RemoteCommandResolver:
    """Submits commands to the remote backend. Implements RemoteResolverPort.

    Single attempt per call, bounded by the configured timeout. Every failure
    comes back as an error RemoteResult; nothing is raised to the caller.
    """

    def __init__(self, config: Optional[RemoteConfig] = None):
        self._config = config or RemoteConfig()

    @property
    def is_configured(self) -> bool:
        return self._config.is_configured

    @property
    def timeout_seconds(self) -> float:
        return self._config.timeout_ms / 1000

    async def resolve(self, command: str, args: str, user: str) -> RemoteResult:
        if not self.is_configured:
            return RemoteResult.error(
                RemoteErrorKind.NOT_CONFIGURED,
                "LAMBDA_URL or LAMBDA_APIKEY not configured.",
            )

        payload = {"command": command, "args": args, "user": user}
        logger.debug("[%s] POST %s args=%r user=%s", command, self._config.url, args, user)
        headers = {API_KEY_HEADER: self._config.api_key}
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)

        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(
                    self._config.url, json=payload, headers=headers
                ) as resp:
                    if resp.status != 200:
                        body = await resp.text()
                        return RemoteResult.error(
                            RemoteErrorKind.TRANSPORT, f"HTTP {resp.status}: {body[:200]}"
                        )
                    data = await resp.json(content_type=None)
        except Exception as e:
            # aiohttp.ClientError, asyncio.TimeoutError, JSON decode errors
            return RemoteResult.error(
                RemoteErrorKind.TRANSPORT, f"{type(e).__name__}: {e}"
            )

        return self._interpret(data)

    @staticmethod
    def _interpret(data) -> RemoteResult:
        """Map the backend's JSON envelope to a RemoteResult."""
        if not isinstance(data, dict):
            return RemoteResult.error(RemoteErrorKind.TRANSPORT, f"malformed response: {data!r}")

        if data.get("errorType") is not None:
            return RemoteResult.error(
                RemoteErrorKind.BACKEND,
                f"{data['errorType']}: {data.get('errorMessage', '')}",
            )

        result = data.get("result")
        if not isinstance(result, str):
            return RemoteResult.error(
                RemoteErrorKind.TRANSPORT, f"response has no string result: {data!r}"
            )

        if result.startswith(UNKNOWN_COMMAND_SENTINEL):
            return RemoteResult.error(RemoteErrorKind.NOT_FOUND, result, text=result)

        return RemoteResult.success(result)
