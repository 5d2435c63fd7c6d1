"""Generation request data models."""
import random
from decimal import ROUND_HALF_UP, Decimal
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

MAX_LORA_TAGS = 3
SEED_UPPER_BOUND = 10_000_000


def random_seed() -> int:
    """Return a seed in the same range the WebUI examples use."""
    return random.randrange(SEED_UPPER_BOUND)


def format_weight(weight: float) -> str:
    """Format a weight with one decimal digit, rounding halves away from zero.

    The float's exact binary value is rounded, so 0.25 gives "0.3" while
    0.35 (stored just below a half) gives "0.3".
    """
    return str(Decimal(weight).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


class LoraTag(BaseModel):
    """One LoRA weight-set reference embedded into the prompt."""

    name: str = ""
    weight: float = 1.0

    def render(self) -> str:
        if not self.name:
            return ""
        return f"<lora:{self.name}:{format_weight(self.weight)}>"


class StyleTagSet(BaseModel):
    """Up to three LoRA tags, rendered in input order with no separator."""

    tags: list[LoraTag] = Field(default_factory=list, max_length=MAX_LORA_TAGS)

    def render(self) -> str:
        return "".join(tag.render() for tag in self.tags)


class GenerationRequest(BaseModel):
    """Everything needed for one img2img run. Built once from CLI arguments."""

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1)
    style_tags: str = ""
    denoising_strength: float = Field(0.8, ge=0.0, le=1.0)
    seed: int = Field(default_factory=random_seed)
    reference_image: Optional[Path] = None
    output_index: int = Field(0, ge=0)
    channel: Optional[str] = None

    @property
    def full_prompt(self) -> str:
        return self.prompt + self.style_tags

    @property
    def caption(self) -> str:
        return f"Generated image: {self.prompt}"
