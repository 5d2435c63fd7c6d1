"""Stable Diffusion img2img client."""
import base64
import logging
from pathlib import Path
from typing import Iterable

import requests

from img2img_relay.core.errors import (
    EmptySynthesisResultError,
    ReferenceImageNotFoundError,
    SynthesisRequestError,
)
from img2img_relay.models.generation import GenerationRequest, LoraTag, StyleTagSet
from img2img_relay.models.synthesis import (
    AlwaysOnScripts,
    ControlNetScript,
    ControlNetUnit,
    SynthesisPayload,
    SynthesisResult,
)

logger = logging.getLogger(__name__)

IMG2IMG_PATH = "/sdapi/v1/img2img"


def compose_style_tags(pairs: Iterable[tuple[str, float]]) -> str:
    """Render (name, weight) pairs as concatenated ``<lora:name:w>`` tags.

    Pairs with an empty name are skipped. Weights are not range-checked and
    duplicates pass through as given.

    Raises:
        pydantic.ValidationError: When more than three pairs are supplied.
    """
    tag_set = StyleTagSet(tags=[LoraTag(name=name, weight=weight) for name, weight in pairs])
    tags = tag_set.render()
    logger.debug("Composed LoRA tags: %s", tags)
    return tags


def load_reference_image(path: Path) -> str:
    """Read the reference image and return it base64-encoded.

    Raises:
        ReferenceImageNotFoundError: When the file does not exist.
    """
    path = Path(path)
    if not path.is_file():
        raise ReferenceImageNotFoundError(path)
    return base64.b64encode(path.read_bytes()).decode("ascii")


class SynthesisClient:
    """Submits img2img requests to a local Stable Diffusion WebUI."""

    def __init__(self, base_url: str = "http://127.0.0.1:7860") -> None:
        self.base_url = base_url.rstrip("/")

    @property
    def img2img_url(self) -> str:
        return f"{self.base_url}{IMG2IMG_PATH}"

    def build_payload(self, request: GenerationRequest, encoded_image: str) -> SynthesisPayload:
        """Assemble the img2img payload.

        The encoded reference image is used twice: as the init image and as
        the ControlNet face-identity conditioning image.
        """
        return SynthesisPayload(
            init_images=[encoded_image],
            prompt=request.full_prompt,
            denoising_strength=request.denoising_strength,
            seed=request.seed,
            alwayson_scripts=AlwaysOnScripts(
                ControlNet=ControlNetScript(args=[ControlNetUnit(image=encoded_image)])
            ),
        )

    def img2img(self, payload: SynthesisPayload) -> SynthesisResult:
        """POST the payload and parse the response.

        Raises:
            SynthesisRequestError: On a non-2xx response.
            EmptySynthesisResultError: When the response carries no images.
        """
        logger.info("Sending request to Stable Diffusion API", extra={"url": self.img2img_url})
        response = requests.post(self.img2img_url, json=payload.model_dump())

        if not response.ok:
            raise SynthesisRequestError(response.text, status_code=response.status_code)

        result = SynthesisResult.model_validate(response.json())
        if not result.images:
            raise EmptySynthesisResultError()
        return result
