"""Errors raised by the record store."""
from __future__ import annotations


class StoreError(Exception):
    """Base class for everything the store reports to callers."""


class NotFound(StoreError):
    def __init__(self, entity: str, key: object):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class StorageFault(StoreError):
    """Schema, connection or query failure. Never retried."""


class UnknownCommand(StoreError):
    def __init__(self, command: str):
        self.command = command
        super().__init__(f"Unknown command: {command}")


__all__ = ["NotFound", "StorageFault", "StoreError", "UnknownCommand"]
