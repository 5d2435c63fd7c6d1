"""Image persistence."""
import base64
import logging
from pathlib import Path

logger = logging.getLogger(__name__)


def output_path_for(output_dir: Path, index: int) -> Path:
    """Return the target file for an output index: ``{output_dir}/{index}.png``."""
    return Path(output_dir) / f"{index}.png"


def save_encoded_image(b64_image: str, output_path: Path) -> Path:
    """Decode a base64 image and write it to output_path.

    The parent directory is created if missing. The write is not atomic.

    Args:
        b64_image: Base64-encoded image data as returned by the WebUI.
        output_path: Destination file path.

    Returns:
        The path written to.
    """
    output_path = Path(output_path)
    image_bytes = base64.b64decode(b64_image)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(image_bytes)
    logger.info("Saved generated image to %s (%d bytes)", output_path, len(image_bytes))
    return output_path
