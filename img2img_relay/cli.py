"""Command-line entry point: img2img-relay <prompt> [seed] [options].

Generates an image from the reference image through a local Stable Diffusion
WebUI, saves it under the output directory and optionally relays it to an
OpenClaw channel.

Usage:
    img2img-relay "red dress"
    img2img-relay "red dress" 12345
    img2img-relay "red dress" 12345 --lora detail:0.6 --strength 0.7 --channel art
"""
import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

import requests
from pydantic import ValidationError

from img2img_relay.core.config import get_settings
from img2img_relay.core.errors import Img2ImgRelayError
from img2img_relay.core.logging import setup_logging
from img2img_relay.models.generation import MAX_LORA_TAGS, GenerationRequest
from img2img_relay.services.generation import GenerationService
from img2img_relay.services.relay import RelayDispatcher
from img2img_relay.services.synthesis import SynthesisClient, compose_style_tags

logger = setup_logging("cli")

EXAMPLES = """\
Example:
  img2img-relay "change to a red dress"
  img2img-relay "change to a red dress" 12345
  img2img-relay "change to a red dress" 12345 --lora detail:0.6 --channel art
"""


class _ArgumentParser(argparse.ArgumentParser):
    """ArgumentParser that exits with status 1 on bad arguments."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_usage(sys.stderr)
        self.exit(1, f"{self.prog}: error: {message}\n")


def parse_lora(value: str) -> tuple[str, float]:
    """Parse ``NAME[:WEIGHT]``; the weight defaults to 1.0."""
    name, sep, weight = value.rpartition(":")
    if not sep:
        return value, 1.0
    try:
        return name, float(weight)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid LoRA weight in {value!r}")


def build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="img2img-relay",
        description="Generate an image with Stable Diffusion img2img and relay it via OpenClaw.",
        epilog=EXAMPLES,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("prompt", help="Text prompt for image generation.")
    parser.add_argument("seed", nargs="?", type=int, help="Random seed (optional).")
    parser.add_argument(
        "--lora",
        action="append",
        type=parse_lora,
        default=[],
        metavar="NAME[:WEIGHT]",
        help=f"LoRA tag to append to the prompt (up to {MAX_LORA_TAGS}).",
    )
    parser.add_argument(
        "--strength", type=float, default=0.8, help="Denoising strength, 0-1 (default: 0.8)."
    )
    parser.add_argument(
        "--index", type=int, default=0, help="Output index; the file is saved as <index>.png."
    )
    parser.add_argument("--channel", help="OpenClaw channel to relay the image to.")
    parser.add_argument("--reference", type=Path, help="Reference image to transform.")
    parser.add_argument("--output-dir", type=Path, help="Directory for generated images.")
    parser.add_argument(
        "--direct",
        action="store_true",
        help="Relay through the gateway HTTP API instead of the openclaw CLI.",
    )
    return parser


def build_request(args: argparse.Namespace) -> GenerationRequest:
    """Turn parsed arguments into a GenerationRequest.

    Raises:
        pydantic.ValidationError: On out-of-range values or too many LoRA tags.
    """
    fields: dict = {
        "prompt": args.prompt,
        "style_tags": compose_style_tags(args.lora),
        "denoising_strength": args.strength,
        "output_index": args.index,
        "channel": args.channel,
        "reference_image": args.reference,
    }
    if args.seed is not None:
        fields["seed"] = args.seed
    return GenerationRequest(**fields)


def build_service(args: argparse.Namespace) -> GenerationService:
    """Wire a GenerationService from settings and CLI overrides.

    Raises:
        pydantic.ValidationError: When an environment value is invalid.
    """
    settings = get_settings()
    return GenerationService(
        synthesis_client=SynthesisClient(settings.sd_api_url),
        output_dir=args.output_dir or settings.resolved_output_dir(),
        default_reference_image=settings.reference_image_path,
        relay=RelayDispatcher(settings.relay_config(use_cli=False if args.direct else None)),
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = build_parser()

    if not argv:
        parser.print_usage()
        print(EXAMPLES)
        return 1

    args = parser.parse_args(argv)
    try:
        request = build_request(args)
    except ValidationError as exc:
        parser.error(str(exc))

    try:
        service = build_service(args)
        result = service.generate(request)
    except (Img2ImgRelayError, requests.RequestException, OSError, ValueError) as exc:
        logger.error(
            "Generation failed: %s",
            exc,
            exc_info=True,
            extra={"status_code": getattr(exc, "status_code", None)},
        )
        print(f"[ERROR] {exc}", file=sys.stderr)
        return 1

    print("\n--- Result ---")
    print(f"Image saved to: {result}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
