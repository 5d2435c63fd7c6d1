"""Relay (OpenClaw gateway) data models."""
from typing import Literal, Optional

from pydantic import BaseModel


class RelayMessage(BaseModel):
    """Message handed to the OpenClaw CLI or gateway."""

    action: Literal["send"] = "send"
    channel: str
    message: str
    media: Optional[str] = None


class RelayConfig(BaseModel):
    """Explicit relay configuration, built from Settings at startup."""

    gateway_url: str = "http://localhost:18789"
    gateway_token: Optional[str] = None
    command: str = "openclaw"
    use_cli: bool = True
