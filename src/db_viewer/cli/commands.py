from __future__ import annotations
import argparse
import json
import logging
import sys
import webbrowser
from dataclasses import dataclass
from pathlib import Path
from dotenv import load_dotenv

from db_viewer import __version__
from db_viewer.cli.detect import detect_db_files
from db_viewer.config import ViewerConfig, load_viewer_config

logger = logging.getLogger(__name__)

EPILOG = """
Examples:
  db-viewer                                     # Auto-detect in ./src/db/
  db-viewer ./src/db                            # Specify a directory
  db-viewer -s ./db/schema.ts -f ./db/index.ts  # Explicit paths
  db-viewer -p 4000 -o                          # Custom port, auto-open
  db-viewer --json > catalog.json               # Print parsed output
"""


@dataclass
class CliConfig:
    """Resolved command-line settings.

    Paths are absolute, or "" when the file was neither given nor found.
    """
    schema_path: str
    functions_path: str
    port: int
    host: str
    open_browser: bool
    watch: bool
    json_output: bool
    viewer: ViewerConfig


def _fail(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)
    sys.exit(1)


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="db-viewer",
        description="db-viewer - Visualize your SQLite schema and query functions",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("path", nargs="?", default=".",
                        help="Directory to search for db files (default: .)")
    parser.add_argument("-s", "--schema", help="Path to schema.ts file")
    parser.add_argument("-f", "--functions", help="Path to index.ts (db functions file)")
    parser.add_argument("-p", "--port", help="Server port (default: 3456)")
    parser.add_argument("--host", help="Bind address (default: 127.0.0.1)")
    parser.add_argument("-o", "--open", action="store_true",
                        help="Open browser automatically")
    parser.add_argument("--watch", action="store_true",
                        help="Re-parse files when they change")
    parser.add_argument("--config", help="Path to YAML config file")
    parser.add_argument("--json", action="store_true",
                        help="Print parsed schema and functions as JSON and exit")
    parser.add_argument("--log-level", help="Log level (DEBUG, INFO, WARNING, ERROR)")
    parser.add_argument("-v", "--version", action="version",
                        version=f"db-viewer v{__version__}")
    return parser


def parse_cli_args(argv: list[str] | None = None) -> CliConfig:
    """Parse arguments and resolve the files to view.

    Explicit --schema/--functions paths win; anything missing is looked up
    under the positional directory. Exits with status 1 when the port is
    invalid, the config cannot be loaded, or no file is found at all.

    Args:
        argv: Arguments without the program name (default: sys.argv[1:])

    Returns:
        CliConfig with absolute paths
    """
    args = build_parser().parse_args(argv)

    try:
        viewer = load_viewer_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))

    port = viewer.server.port
    if args.port is not None:
        try:
            port = int(args.port, 10)
        except ValueError:
            port = 0
        if port < 1 or port > 65535:
            _fail("Invalid port number")

    if args.log_level:
        data = viewer.model_dump()
        data["logging"]["level"] = args.log_level
        try:
            viewer = ViewerConfig.model_validate(data)
        except ValueError:
            _fail(f"Invalid log level: {args.log_level}")

    schema_path = args.schema
    functions_path = args.functions

    if not schema_path or not functions_path:
        detected = detect_db_files(args.path, viewer.detection)
        if not schema_path and detected.schema_path:
            schema_path = str(detected.schema_path)
        if not functions_path and detected.functions_path:
            functions_path = str(detected.functions_path)

    if not schema_path and not functions_path:
        print("Error: Could not find schema.ts or index.ts files.", file=sys.stderr)
        print("Please specify paths with --schema and --functions options,", file=sys.stderr)
        print("or run from a directory containing these files.", file=sys.stderr)
        sys.exit(1)

    return CliConfig(
        schema_path=str(Path(schema_path).resolve()) if schema_path else "",
        functions_path=str(Path(functions_path).resolve()) if functions_path else "",
        port=port,
        host=args.host or viewer.server.host,
        open_browser=args.open or viewer.server.open_browser,
        watch=args.watch or viewer.server.watch,
        json_output=args.json,
        viewer=viewer,
    )


def setup_logging(config: ViewerConfig) -> None:
    """Configure root logging on stderr."""
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format=config.logging.format,
        stream=sys.stderr,
    )


def dump_json(cli: CliConfig) -> str:
    """Render the parsed artifacts as one JSON document."""
    from db_viewer.parser import derive_relationships
    from db_viewer.web.context import ViewerContext

    context = ViewerContext(cli.schema_path, cli.functions_path)
    context.load()
    schema, functions = context.snapshot()

    return json.dumps(
        {
            "schema": schema.to_dict() if schema else None,
            "functions": functions.to_dict() if functions else None,
            "relationships": (
                [r.to_dict() for r in derive_relationships(schema)] if schema else []
            ),
        },
        indent=2,
    )


def serve(cli: CliConfig) -> None:
    """Parse the files and run the web server until interrupted."""
    from db_viewer.watcher import SourceWatcher
    from db_viewer.web.app import create_app, run_server
    from db_viewer.web.context import ViewerContext

    context = ViewerContext(cli.schema_path, cli.functions_path)
    context.load()

    watcher = None
    if cli.watch:
        watcher = SourceWatcher(context, cli.viewer.server.watch_debounce_seconds)

    app = create_app(context, watcher=watcher)

    url = f"http://{cli.host}:{cli.port}"
    print(f"\ndb-viewer running at {url}", file=sys.stderr)
    if cli.open_browser:
        webbrowser.open(url)

    run_server(app, host=cli.host, port=cli.port, log_level=cli.viewer.logging.level.lower())


def run(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    # Load environment variables first
    load_dotenv()

    cli = parse_cli_args(argv)
    setup_logging(cli.viewer)

    try:
        if cli.json_output:
            print(dump_json(cli))
        else:
            serve(cli)
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
