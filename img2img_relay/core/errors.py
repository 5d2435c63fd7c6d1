"""Exception types raised along the generate → save → relay pipeline."""
from pathlib import Path
from typing import Optional


class Img2ImgRelayError(Exception):
    """Base class for every fatal pipeline error."""


class ReferenceImageNotFoundError(Img2ImgRelayError, FileNotFoundError):
    """The reference image used as init/ControlNet input does not exist."""

    def __init__(self, path: Path) -> None:
        self.path = path
        super().__init__(f"Prompt image not found: {path}")

    def __str__(self) -> str:
        return self.args[0]


class SynthesisRequestError(Img2ImgRelayError):
    """The image service answered with a non-2xx status."""

    def __init__(self, body: str, status_code: Optional[int] = None) -> None:
        self.body = body
        self.status_code = status_code
        super().__init__(f"API request failed: {body}")


class EmptySynthesisResultError(Img2ImgRelayError):
    """The image service answered successfully but returned no images."""

    def __init__(self) -> None:
        super().__init__("API response contained no images")


class RelayError(Img2ImgRelayError):
    """Forwarding the image to the messaging gateway failed."""

    def __init__(self, body: str) -> None:
        self.body = body
        super().__init__(f"OpenClaw send failed: {body}")


class RelayNotConfiguredError(Img2ImgRelayError):
    """A channel was requested but no relay dispatcher was wired in."""

    def __init__(self, channel: str) -> None:
        self.channel = channel
        super().__init__(f"Cannot relay to channel {channel!r}: no relay dispatcher configured")
