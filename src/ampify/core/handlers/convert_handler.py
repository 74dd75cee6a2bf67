# src/ampify/core/handlers/convert_handler.py
import argparse
import asyncio
import logging
from typing import List, Optional

from ampify.core.exceptions import AmpifyError
from ampify.core.managers.config_manager import config_manager
from ampify.core.utils.console_logger import ConsoleLogger
from ampify.core.utils.path_utils import PathUtils
from converter.controllers.convert_controller import ConvertController
from converter.model import ConversionResult, ConversionSettings

logger = logging.getLogger(__name__)

# --- HELP TEXT ---

convert_help_text = """
  ampify --url <URL> [--output-dir <dir>] [--css <file>] [--no-render] [--verify]
                      Renders <URL>, strips everything the AMP validator rejects,
                      adds the AMP boilerplate and writes original.html and
                      modified.html. CSS from inline.css is inlined.
""".strip()

USAGE_EXAMPLE = "ampify --url https://www.example.com"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ampify",
        description="Convert a rendered web page into an AMP HTML document.",
        epilog=convert_help_text,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--url", help="Page to convert (e.g. https://www.example.com).")
    parser.add_argument("--output-dir", default=None, help="Where original.html and modified.html are written.")
    parser.add_argument("--css", default=None, help="Stylesheet to inline (default: inline.css).")
    parser.add_argument("--no-render", action="store_true",
                        help="Fetch the raw HTML with a plain GET instead of a headless browser.")
    parser.add_argument("--verify", action="store_true", default=None,
                        help="Validate modified.html after writing it.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ...).")
    return parser


def _print_usage() -> None:
    print("Must provide a url parameter. Example:")
    print(f"  {USAGE_EXAMPLE}")


def apply_overrides(args: argparse.Namespace) -> None:
    """Writes flags that shadow a settings.json value into the in-memory config."""
    if args.verify is not None:
        config_manager.set_nested("validator.verify_output", args.verify)
    if args.log_level:
        config_manager.set_nested("debug.level", args.log_level.upper())


def build_settings(args: argparse.Namespace) -> ConversionSettings:
    """Builds the run settings from the 'converter' and 'validator' config sections plus path flags."""
    converter_config = config_manager.get_nested("converter", {})
    verify = config_manager.get_nested("validator.verify_output", False)

    return ConversionSettings(
        url=args.url,
        output_dir=PathUtils.get_output_dir(args.output_dir),
        css_path=PathUtils.get_inline_css_path(args.css, converter_config.get("css_file_name", "inline.css")),
        render=not args.no_render,
        verify_output=bool(verify),
        original_file_name=converter_config.get("original_file_name", "original.html"),
        modified_file_name=converter_config.get("modified_file_name", "modified.html"),
        replacement_tag=converter_config.get("replacement_tag", "div"),
        lang=converter_config.get("lang", "en"),
        keep_json_ld=bool(converter_config.get("keep_json_ld", True)),
        rewrite_document_relative=bool(converter_config.get("rewrite_document_relative", False)),
        fail_on_validator_unavailable=bool(config_manager.get_nested("validator.fail_on_unavailable", False)),
    )


def _print_summary(result: ConversionResult, console: ConsoleLogger) -> None:
    with console.grouped():
        console.status(f"Original HTML: {result.original_path}")
        console.status(f"AMP HTML:      {result.modified_path}")
        console.status(
            f"Validator: {result.validation_status} ({result.initial_error_count} error(s)), "
            f"{len(result.removed_attributes)} attribute(s) removed, "
            f"{len(result.replaced_tags)} tag(s) replaced in {result.duration:.2f}s"
        )


def handle_convert(args: List[str], controller: Optional[ConvertController] = None) -> int:
    """Entry point for a conversion. Returns a shell exit code."""
    parser = _build_parser()
    try:
        parsed = parser.parse_args(args)
    except SystemExit as e:
        # --help exits with 0, bad flags with 2
        return int(e.code or 0)

    if not parsed.url:
        _print_usage()
        return 2

    console = ConsoleLogger("Main")
    console.title(f"AMP conversion of {ConsoleLogger.trim_url(parsed.url, 60)}")
    try:
        apply_overrides(parsed)
        settings = build_settings(parsed)
        controller = controller or ConvertController(console=console)
        result = asyncio.run(controller.run(settings))
    except AmpifyError as e:
        ConsoleLogger.set_group(0)
        console.error(f"❌ Error: {e}")
        logger.debug("Conversion failed", exc_info=True)
        return 1
    except KeyboardInterrupt:
        ConsoleLogger.set_group(0)
        console.error("Interrupted.")
        return 130
    except Exception as e:
        ConsoleLogger.set_group(0)
        logger.error("Unexpected error while converting %s: %s", parsed.url, e, exc_info=True)
        console.error(f"❌ Unexpected error: {e}")
        return 1

    _print_summary(result, console)
    return 0
