"""Remote command backend adapter."""

from pyfi_bot.adapters.remote.resolver import RemoteCommandResolver

__all__ = ["RemoteCommandResolver"]
