"""Relay generated images to a chat channel via OpenClaw."""
import logging
import subprocess

import requests

from img2img_relay.core.errors import RelayError
from img2img_relay.models.relay import RelayConfig, RelayMessage

logger = logging.getLogger(__name__)


class RelayDispatcher:
    """Sends a RelayMessage through the OpenClaw CLI or its HTTP gateway.

    Configuration is passed in explicitly; this class never reads the
    process environment.
    """

    def __init__(self, config: RelayConfig) -> None:
        self.config = config

    def send(self, message: RelayMessage) -> None:
        """Dispatch using the transport selected by config.use_cli.

        Raises:
            RelayError: When the command exits non-zero or the gateway
                returns a non-2xx status.
        """
        if self.config.use_cli:
            self._send_via_cli(message)
        else:
            self._send_via_gateway(message)

    def build_command(self, message: RelayMessage) -> list[str]:
        """Return the relay command as an argument vector (never a shell string)."""
        cmd = [
            self.config.command,
            "message",
            "send",
            "--action",
            message.action,
            "--channel",
            message.channel,
            "--message",
            message.message,
        ]
        if message.media is not None:
            cmd += ["--media", message.media]
        return cmd

    def _send_via_cli(self, message: RelayMessage) -> None:
        cmd = self.build_command(message)
        logger.debug("Running relay command: %s", cmd[0])
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except FileNotFoundError as exc:
            raise RelayError(f"relay command not found: {self.config.command}") from exc

        if result.returncode != 0:
            detail = (result.stderr or result.stdout or "").strip()
            raise RelayError(detail or f"{self.config.command} exited with status {result.returncode}")

    def _send_via_gateway(self, message: RelayMessage) -> None:
        headers = {"Content-Type": "application/json"}
        if self.config.gateway_token:
            headers["Authorization"] = f"Bearer {self.config.gateway_token}"

        url = f"{self.config.gateway_url.rstrip('/')}/message"
        response = requests.post(url, json=message.model_dump(exclude_none=True), headers=headers)

        if not response.ok:
            raise RelayError(response.text)
