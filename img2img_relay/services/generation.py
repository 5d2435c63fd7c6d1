"""GenerationService: runs one img2img request end to end."""
from pathlib import Path
from typing import Optional

from img2img_relay.core.errors import RelayNotConfiguredError
from img2img_relay.core.logging import setup_logging
from img2img_relay.models.generation import GenerationRequest
from img2img_relay.models.relay import RelayMessage
from img2img_relay.services.relay import RelayDispatcher
from img2img_relay.services.storage import output_path_for, save_encoded_image
from img2img_relay.services.synthesis import SynthesisClient, load_reference_image

logger = setup_logging("generation")


class GenerationService:
    """Orchestrates a single generation.

    Steps:
    1. Load and encode the reference image (fails before any network call)
    2. Build the img2img payload and submit it
    3. Decode images[0] and write it to {output_dir}/{output_index}.png
    4. Relay the saved file when the request names a channel

    A relay failure propagates after step 3; the saved image is kept.
    """

    def __init__(
        self,
        synthesis_client: SynthesisClient,
        output_dir: Path,
        default_reference_image: Path,
        relay: Optional[RelayDispatcher] = None,
    ) -> None:
        self.synthesis_client = synthesis_client
        self.output_dir = Path(output_dir)
        self.default_reference_image = Path(default_reference_image)
        self.relay = relay

    def generate(self, request: GenerationRequest) -> Path:
        """Generate, save and optionally relay one image.

        Args:
            request: Generation parameters.

        Returns:
            Path of the saved PNG.
        """
        reference = request.reference_image or self.default_reference_image
        encoded_image = load_reference_image(reference)

        payload = self.synthesis_client.build_payload(request, encoded_image)
        result = self.synthesis_client.img2img(payload)

        output_path = output_path_for(self.output_dir, request.output_index)
        save_encoded_image(result.images[0], output_path)
        logger.info(
            "Image generated and saved to %s",
            output_path,
            extra={"seed": request.seed, "output_path": output_path},
        )

        if request.channel:
            self._relay(request, output_path)

        return output_path

    def _relay(self, request: GenerationRequest, output_path: Path) -> None:
        if self.relay is None:
            raise RelayNotConfiguredError(request.channel)
        transport = "cli" if self.relay.config.use_cli else "gateway"
        logger.info(
            "Sending image to channel: %s",
            request.channel,
            extra={"channel": request.channel, "transport": transport},
        )
        self.relay.send(
            RelayMessage(
                channel=request.channel,
                message=request.caption,
                media=str(output_path),
            )
        )
        logger.info("Image sent to %s", request.channel, extra={"channel": request.channel})
