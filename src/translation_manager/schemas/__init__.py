"""Pydantic models for the catalog WebSocket protocol."""

from . import requests, responses

__all__ = ["requests", "responses"]
