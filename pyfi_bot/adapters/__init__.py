"""Adapters — Discord gateway and remote command backend."""
