"""Stable Diffusion WebUI img2img request/response models."""
from typing import Any

from pydantic import BaseModel, Field

DEFAULT_CHECKPOINT = "realisticVisionV60B1"
DEFAULT_NEGATIVE_PROMPT = "nsfw,blurry,bad anatomy,low quality,worst quality,normal quality"


class ControlNetUnit(BaseModel):
    """Single ControlNet unit running the face-identity IP-Adapter."""

    enabled: bool = True
    pixel_perfect: bool = True
    module: str = "ip-adapter_face_id_plus"
    model: str = "ip-adapter-faceid-plusv2_sd15"
    weight: float = 1
    image: str


class ControlNetScript(BaseModel):
    args: list[ControlNetUnit]


class AlwaysOnScripts(BaseModel):
    ControlNet: ControlNetScript


class SynthesisPayload(BaseModel):
    """JSON body for POST /sdapi/v1/img2img."""

    init_images: list[str]
    prompt: str
    batch_size: int = 1
    steps: int = 25
    denoising_strength: float
    cfg_scale: float = 7
    width: int = 512
    height: int = 768
    seed: int
    restore_faces: bool = True
    sd_model_checkpoint: str = DEFAULT_CHECKPOINT
    negative_prompt: str = DEFAULT_NEGATIVE_PROMPT
    alwayson_scripts: AlwaysOnScripts


class SynthesisResult(BaseModel):
    """Response of /sdapi/v1/img2img. Only images[0] is consumed."""

    images: list[str] = Field(default_factory=list)
    parameters: dict[str, Any] = Field(default_factory=dict)
    info: str = ""
