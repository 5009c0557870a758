"""Command-line entry point for stack-resolver.

This module provides the main entry point. It handles:
- Configuration loading
- Logging setup
- Loading source maps from files, directories and ZIP archives
- Reading the error stack from a file or stdin
- Printing resolved frames as text or JSON
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

import structlog
from pydantic import ValidationError

from stack_resolver._version import __version__
from stack_resolver.models.frame import ResolvedFrame

log = structlog.get_logger()


def setup_logging(
    debug: bool = False,
    log_format: str = "console",
    file_path: Path | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging.

    Args:
        debug: Enable debug logging if True
        log_format: Output format ("json" or "console")
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging
    """
    from stack_resolver.utils.logging import LogFormat, LogLevel, configure_logging

    level = LogLevel.DEBUG if debug else LogLevel.WARNING
    fmt = LogFormat(log_format.lower())

    configure_logging(
        level=level,
        log_format=fmt,
        file_path=file_path,
        file_enabled=file_enabled,
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments.

    Returns:
        Parsed argument namespace
    """
    parser = argparse.ArgumentParser(
        prog="stack-resolver",
        description="Resolve minified JavaScript stack traces using source maps",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    parser.add_argument(
        "-m",
        "--maps",
        type=Path,
        nargs="+",
        required=True,
        help="Source map files, directories or ZIP archives, in priority order",
    )

    parser.add_argument(
        "-s",
        "--stack",
        type=Path,
        default=None,
        help="File containing the error stack (default: read stdin)",
    )

    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=None,
        help="Path to YAML configuration file",
    )

    parser.add_argument(
        "-o",
        "--output",
        choices=["text", "json"],
        default="text",
        help="Result output format (default: text)",
    )

    parser.add_argument(
        "-d",
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--format",
        choices=["json", "console"],
        default="console",
        help="Log output format (default: console)",
    )

    return parser.parse_args(argv)


def render_text(frames: list[ResolvedFrame]) -> str:
    """Render resolved frames as a numbered, human-readable listing."""
    lines: list[str] = []

    for number, frame in enumerate(frames, start=1):
        suffix = "" if frame.has_mapping else "  [unmapped]"
        lines.append(f"#{number} {frame.function_name}  {frame.location}{suffix}")

        if frame.snippet is not None:
            snippet = frame.snippet
            for offset, code in enumerate(snippet.content.splitlines()):
                line_number = snippet.start_line + offset
                marker = ">" if line_number == snippet.highlight_line else " "
                lines.append(f"    {marker} {line_number:>5} | {code}")

    return "\n".join(lines)


def render_json(frames: list[ResolvedFrame]) -> str:
    """Render resolved frames as a JSON array."""
    payload = [frame.to_dict() for frame in frames]
    return json.dumps(payload, indent=2, ensure_ascii=False)


async def run(
    map_paths: list[Path],
    stack_path: Path | None,
    config_path: Path | None,
    output: str = "text",
    debug: bool = False,
) -> int:
    """Load inputs, resolve the stack and print the result.

    Args:
        map_paths: Source map files, directories or archives
        stack_path: File with the error stack, or None for stdin
        config_path: Optional YAML configuration file
        output: "text" or "json"
        debug: Keep DEBUG logging regardless of the configured level

    Returns:
        Exit code (0 for success, non-zero for error)
    """
    from stack_resolver.adapters.files import SourceMapLoadError, load_documents
    from stack_resolver.config.loader import load_config
    from stack_resolver.core.pipeline import resolve_stack
    from stack_resolver.utils.async_helpers import InputError
    from stack_resolver.utils.logging import LogLevel, configure_logging

    try:
        config = load_config(config_path)

        if config_path is not None:
            configure_logging(
                level=LogLevel.DEBUG if debug else config.logging.level,
                log_format=config.logging.format,
                file_path=config.logging.file.path if config.logging.file.enabled else None,
                file_enabled=config.logging.file.enabled,
            )

        documents = load_documents(map_paths)
        log.info("source_maps_loaded", count=len(documents))

        if stack_path is not None:
            raw_text = stack_path.read_text(encoding="utf-8", errors="replace")
        else:
            raw_text = sys.stdin.read()

        frames = await resolve_stack(documents, raw_text, config=config)

    except FileNotFoundError as e:
        log.error("input_file_not_found", error=str(e))
        return 1
    except ValidationError as e:
        log.error("configuration_invalid", error=str(e))
        return 1
    except SourceMapLoadError as e:
        log.error("source_map_load_failed", error=str(e))
        return 1
    except InputError as e:
        print(str(e), file=sys.stderr)
        return 1
    except ValueError as e:
        log.error("configuration_invalid", error=str(e))
        return 1

    if output == "json":
        print(render_json(frames))
    else:
        print(render_text(frames))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    setup_logging(
        debug=args.debug,
        log_format=args.format,
    )

    try:
        return asyncio.run(run(args.maps, args.stack, args.config, args.output, args.debug))
    except KeyboardInterrupt:
        log.info("interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
