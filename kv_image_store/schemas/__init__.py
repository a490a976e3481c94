"""Pydantic schemas for values leaving the store."""

from .payload import Payload

__all__ = ["Payload"]
