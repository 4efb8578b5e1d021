"""Main CLI entry point for the strict-xml command-line tool.

Provides well-formedness checking of files and directories, and a tree dump
of a single document.
"""

import argparse
import json
import logging
import sys
import time
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Union

from strict_xml_parser import __version__
from strict_xml_parser.api import parse_file
from strict_xml_parser.grammar import XMLSyntaxError
from strict_xml_parser.shared.config import ConfigError, ParserConfig
from strict_xml_parser.shared.logging import get_logger
from strict_xml_parser.tree import XMLElement, XMLFragment, XMLText

XML_SUFFIXES = {".xml", ".xhtml", ".svg"}


class CLIConfig:
    """Configuration management for CLI operations."""

    def __init__(self):
        self.parser_config = ParserConfig()
        self.max_workers = None  # Use system default
        self.output_format = "text"

    @classmethod
    def from_file(cls, config_path: Path) -> "CLIConfig":
        """Load CLI configuration from a JSON file.

        The file may hold a ``parser`` object (a :class:`ParserConfig`
        mapping) plus ``max_workers`` and ``output_format``.
        """
        config = cls()
        if config_path.exists():
            try:
                with config_path.open(encoding="utf-8") as f:
                    data = json.load(f)
                if "parser" in data:
                    config.parser_config = ParserConfig.from_dict(data["parser"])
                config.max_workers = data.get("max_workers", config.max_workers)
                config.output_format = data.get("output_format", config.output_format)
            except (OSError, ValueError, ConfigError) as e:
                print(f"Warning: Could not load config file: {e}", file=sys.stderr)

        return config


class ProgressTracker:
    """Single-line progress report on stderr for batch checks."""

    BAR_WIDTH = 40
    REFRESH_SECONDS = 1.0

    def __init__(self, total: int, description: str = "Processing"):
        self.total = total
        self.completed = 0
        self.description = description
        self.start_time = time.time()
        self.last_update = 0.0

    @property
    def finished(self) -> bool:
        return self.completed >= self.total

    def update(self, increment: int = 1):
        """Record finished files, redrawing at most once per refresh interval."""
        self.completed += increment
        now = time.time()
        if self.finished or now - self.last_update >= self.REFRESH_SECONDS:
            self._display_progress()
            self.last_update = now

    def _display_progress(self):
        if not self.total:
            return

        filled = self.BAR_WIDTH * self.completed // self.total
        bar = "#" * filled + "." * (self.BAR_WIDTH - filled)
        elapsed = time.time() - self.start_time
        print(f"\r{self.description} [{bar}] {self.completed}/{self.total} "
              f"({elapsed:.1f}s)", end="\n" if self.finished else "", file=sys.stderr)


class XMLProcessor:
    """Core XML processing logic for CLI operations."""

    def __init__(self, config: CLIConfig):
        self.config = config
        self.logger = get_logger(
            __name__, config.parser_config.correlation_id, "cli_processor"
        )

    def process_single_file(self, file_path: Path) -> Dict[str, Any]:
        """Parse a single XML file and summarize the outcome."""
        start_time = time.time()
        result: Dict[str, Any] = {"file": str(file_path)}
        try:
            fragment = parse_file(file_path, config=self.config.parser_config)
        except XMLSyntaxError as e:
            result.update(success=False, error=e.to_dict())
        except (OSError, UnicodeDecodeError) as e:
            self.logger.warning("Could not read file", extra={"file": str(file_path)})
            result.update(success=False, error={"message": str(e)})
        else:
            result.update(
                success=True,
                root_count=len(fragment),
                element_count=fragment.total_elements,
                doctype=fragment.doctype.name if fragment.doctype else None,
            )
        result["processing_time_ms"] = (time.time() - start_time) * 1000
        return result

    def find_xml_files(self, path: Path, recursive: bool = True) -> Iterator[Path]:
        """Find XML files in path."""
        if path.is_file():
            yield path
        elif path.is_dir():
            candidates = path.rglob("*") if recursive else path.glob("*")
            for candidate in sorted(candidates):
                if candidate.is_file() and candidate.suffix.lower() in XML_SUFFIXES:
                    yield candidate

    def batch_process(self, paths: List[Path], recursive: bool = True) -> List[Dict[str, Any]]:
        """Process multiple XML files, in parallel when there is more than one."""
        all_files = []
        for path in paths:
            if not path.exists():
                all_files.append(path)
                continue
            all_files.extend(self.find_xml_files(path, recursive))

        if not all_files:
            return []

        results = []
        progress = ProgressTracker(len(all_files), "Checking XML files")

        if len(all_files) == 1 or self.config.max_workers == 1:
            for file_path in all_files:
                results.append(self.process_single_file(file_path))
                progress.update()
        else:
            with ProcessPoolExecutor(max_workers=self.config.max_workers) as executor:
                future_to_file = {
                    executor.submit(self.process_single_file, file_path): file_path
                    for file_path in all_files
                }
                for future in as_completed(future_to_file):
                    results.append(future.result())
                    progress.update()
            results.sort(key=lambda item: item["file"])

        return results


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="strict-xml",
        description="Strict XML parser with line and column diagnostics"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Check XML files for well-formedness")
    check_parser.add_argument(
        "paths",
        nargs="+",
        type=Path,
        help="XML files or directories to check"
    )
    check_parser.add_argument(
        "--recursive", "-r",
        action="store_true",
        help="Recursively process directories"
    )
    check_parser.add_argument(
        "--format", "-f",
        choices=["json", "csv", "text"],
        default=None,
        help="Output format (default: text)"
    )
    check_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    check_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    check_parser.add_argument(
        "--workers", "-w",
        type=int,
        help="Number of parallel workers"
    )

    tree_parser = subparsers.add_parser("tree", help="Print the parsed tree of an XML file")
    tree_parser.add_argument(
        "path",
        type=Path,
        help="XML file to parse"
    )
    tree_parser.add_argument(
        "--format", "-f",
        choices=["json", "text"],
        default="text",
        help="Output format (default: text)"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def format_results(results: List[Dict[str, Any]], format_type: str) -> str:
    """Format check results for output."""
    if format_type == "json":
        return json.dumps(results, indent=2)

    if format_type == "csv":
        if not results:
            return ""

        lines = ["file,success,roots,elements,line,column,time_ms"]
        for result in results:
            error = result.get("error", {})
            lines.append(
                f"{result['file']},{result['success']},{result.get('root_count', 0)},"
                f"{result.get('element_count', 0)},{error.get('line', '')},"
                f"{error.get('column', '')},{result.get('processing_time_ms', 0):.1f}"
            )
        return "\n".join(lines)

    if not results:
        return "No results to display."

    successful = sum(1 for r in results if r.get("success", False))
    lines = [f"Checked {len(results)} files, {successful} well-formed", "-" * 60]
    for result in results:
        if result.get("success", False):
            lines.append(
                f"OK   {result['file']} ({result.get('element_count', 0)} elements)"
            )
        else:
            lines.append(f"FAIL {result['file']}")
            lines.append(f"     {result.get('error', {}).get('message', '')}")
    return "\n".join(lines)


def format_tree(fragment: XMLFragment) -> str:
    """Render a parsed fragment as an indented outline."""
    lines = []
    if fragment.doctype is not None:
        lines.append(f"DOCTYPE {fragment.doctype.name}")

    def walk(node: Union[XMLElement, XMLText], indent: int) -> None:
        pad = "  " * indent
        if isinstance(node, XMLText):
            if node.data.strip():
                lines.append(f"{pad}{node.data.strip()!r}")
            return
        attributes = "".join(f" {name}={value!r}" for name, value in node.attributes.items())
        lines.append(f"{pad}<{node.tag}{attributes}>")
        for child in node.children:
            walk(child, indent + 1)

    for root in fragment:
        walk(root, 0)
    return "\n".join(lines)


def cmd_check(args: argparse.Namespace) -> int:
    """Handle check command."""
    config = CLIConfig()
    if args.config and args.config.exists():
        config = CLIConfig.from_file(args.config)

    # -v and -q take precedence over the configured level
    if not (args.verbose or args.quiet):
        logging.basicConfig(level=config.parser_config.logging_level)

    if args.workers:
        config.max_workers = args.workers
    if args.format:
        config.output_format = args.format

    processor = XMLProcessor(config)
    try:
        results = processor.batch_process(args.paths, args.recursive)
    except KeyboardInterrupt:
        print("\nProcessing interrupted by user", file=sys.stderr)
        return 1

    formatted_output = format_results(results, config.output_format)

    if args.output:
        try:
            args.output.write_text(formatted_output, encoding="utf-8")
            print(f"Results written to {args.output}", file=sys.stderr)
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
    else:
        print(formatted_output)

    if not results:
        return 1

    successful = sum(1 for r in results if r.get("success", False))
    return 0 if successful == len(results) else 1


def cmd_tree(args: argparse.Namespace) -> int:
    """Handle tree command."""
    try:
        fragment = parse_file(args.path)
    except XMLSyntaxError as e:
        print(str(e), file=sys.stderr)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        print(f"Could not read {args.path}: {e}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(fragment.to_dict(), indent=2))
    else:
        print(format_tree(fragment))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "check":
            return cmd_check(args)
        if args.command == "tree":
            return cmd_tree(args)
        print(f"Unknown command: {args.command}", file=sys.stderr)
        return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130  # Standard exit code for SIGINT


if __name__ == "__main__":
    sys.exit(main())
