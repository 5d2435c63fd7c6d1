"""Configuration management using pydantic-settings."""
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict

from img2img_relay.models.relay import RelayConfig

DEFAULT_REFERENCE_IMAGE = Path(__file__).resolve().parent.parent / "assets" / "clawra.png"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Stable Diffusion WebUI
    sd_api_url: str = "http://127.0.0.1:7860"

    # Filesystem layout
    workspace_root: Path = Path(".")
    output_dir: Path = Path("FramesNew")
    reference_image_path: Path = DEFAULT_REFERENCE_IMAGE

    # OpenClaw relay
    openclaw_gateway_url: str = "http://localhost:18789"
    openclaw_gateway_token: Optional[str] = None
    openclaw_command: str = "openclaw"
    openclaw_use_cli: bool = True

    def resolved_output_dir(self) -> Path:
        """Return the output directory, anchored at workspace_root when relative."""
        if self.output_dir.is_absolute():
            return self.output_dir
        return self.workspace_root / self.output_dir

    def relay_config(self, use_cli: Optional[bool] = None) -> RelayConfig:
        """Build the explicit relay configuration handed to RelayDispatcher."""
        return RelayConfig(
            gateway_url=self.openclaw_gateway_url,
            gateway_token=self.openclaw_gateway_token or None,
            command=self.openclaw_command,
            use_cli=self.openclaw_use_cli if use_cli is None else use_cli,
        )


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""
    return Settings()
