"""Command-line interface for Sadaam Editor."""

import argparse
import logging
import sys
from pathlib import Path

import pydantic

from .adapters.models import create_image_model
from .config import DEFAULT_MODEL_ID, REMOVE_BACKGROUND_PROMPT, ExportFormat
from .core import EditSession, SessionPhase, encode_file, save_export
from .domain.value_objects.config import EditorConfig
from .exceptions import ConfigurationError, ExportError, SessionBusyError, ValidationError
from .utils.env import load_api_key, setup_logging


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser."""
    parser = argparse.ArgumentParser(
        prog="sadaam-editor",
        description="Edit an image with a natural-language instruction using Gemini"
    )

    parser.add_argument("input", help="Input image file")

    prompt_group = parser.add_mutually_exclusive_group(required=True)
    prompt_group.add_argument(
        "-p", "--prompt",
        help="Edit instruction, e.g. 'Add sunglasses'"
    )
    prompt_group.add_argument(
        "--remove-background",
        action="store_true",
        help=f"Shortcut for --prompt '{REMOVE_BACKGROUND_PROMPT}'"
    )

    parser.add_argument(
        "-o", "--output",
        default=".",
        help="Output folder for the edited image (default: current folder)"
    )

    parser.add_argument(
        "-f", "--format",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.PNG.value,
        help="Download format (default: png)"
    )

    parser.add_argument(
        "-m", "--model",
        default=DEFAULT_MODEL_ID,
        help=f"Model identifier (default: {DEFAULT_MODEL_ID})"
    )

    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Verbose output"
    )

    return parser


def build_config(parsed: argparse.Namespace) -> EditorConfig:
    """Build the editor config from parsed arguments.

    Raises:
        ConfigurationError: If an option fails validation
    """
    try:
        return EditorConfig(
            api_key=load_api_key() or "",
            model_id=parsed.model,
            export_format=ExportFormat(parsed.format),
            output_dir=Path(parsed.output),
        )
    except pydantic.ValidationError as e:
        error = e.errors()[0]
        key = ".".join(str(loc) for loc in error["loc"])
        raise ConfigurationError(f"Invalid {key}: {error['msg']}", config_key=key) from e


def main(args: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    # Setup logging
    setup_logging(logging.DEBUG if parsed.verbose else logging.INFO, log_file=None)
    logger = logging.getLogger(__name__)

    input_path = Path(parsed.input)
    if not input_path.is_file():
        logger.error(f"Input not found: {input_path}")
        return 1

    try:
        config = build_config(parsed)
    except ConfigurationError as e:
        logger.error(str(e))
        return 1
    if not config.has_credential:
        logger.warning("No API key found. Set the GEMINI_API_KEY environment variable.")

    try:
        image = encode_file(input_path)
    except ValidationError as e:
        logger.error(f"Rejected {input_path.name}: {e.message}")
        return 1

    session = EditSession()
    session.set_input_image(image)
    session.set_prompt(REMOVE_BACKGROUND_PROMPT if parsed.remove_background else parsed.prompt)

    if not session.can_start():
        logger.error("Prompt cannot be blank")
        return 1

    logger.info(f"Editing {input_path.name} with {config.model_id}...")
    client = create_image_model(config)

    try:
        phase = session.submit(client)
    except SessionBusyError as e:
        logger.error(str(e))
        return 1

    if phase is not SessionPhase.SUCCESS:
        logger.error(f"Edit failed: {session.error_message}")
        return 1

    result = session.result
    if result.text:
        print(result.text)

    if result.image_url:
        try:
            save_export(result.image_url, config.export_format, config.output_dir, config.export_quality)
        except ExportError as e:
            logger.error(f"Export failed: {e.message}")
            return 1
    else:
        logger.info("The model returned text only; no image saved")

    return 0


if __name__ == "__main__":
    sys.exit(main())
