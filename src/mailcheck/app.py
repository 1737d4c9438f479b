from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pydantic import ValidationError
from tqdm import tqdm

from link_prober.services.user_agent_service import generate_default_user_agent
from mail_auditor.dom.builder import DOMBuilder
from mail_auditor.dom.qngine import QNGINE
from mail_auditor.errors import FatalAnalysisError, DictionaryLoadError
from mail_auditor.model import AnalysisOptions
from mail_auditor.services.export_service import ExportService
from mailcheck.core.managers.config_manager import config_manager
from mailcheck.core.utils.configure_logging import configure_logger

logger = logging.getLogger(__name__)


def positive_float(value: str) -> float:
    """argparse type for durations that must be above zero."""
    try:
        number = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a number")
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be greater than 0, got {value}")
    return number


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not a whole number")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {value}")
    return number


def build_options(parsed_args: argparse.Namespace, **extra) -> AnalysisOptions:
    """Settings from settings.json, overridden by command line flags."""
    chrome_version = config_manager.get_nested("user_agent.chrome_version", "120.0.0.0")
    overrides = {
        "spelling_strategy": getattr(parsed_args, "spelling", None),
        "dictionary_path": getattr(parsed_args, "dictionary", None),
        "max_probes": getattr(parsed_args, "max_probes", None),
        "probe_deadline": getattr(parsed_args, "deadline", None),
        "user_agent": generate_default_user_agent(chrome_version),
    }
    if getattr(parsed_args, "no_probe", False):
        overrides["probe_links"] = False
    overrides.update(extra)
    return AnalysisOptions.from_config(config_manager, **overrides)


def print_invalid_options(error: ValidationError) -> None:
    """One line per rejected setting instead of a traceback."""
    print("❌ Invalid analysis settings:", file=sys.stderr)
    for problem in error.errors():
        field = ".".join(str(part) for part in problem["loc"])
        print(f"   {field}: {problem['msg']}", file=sys.stderr)


async def _analyze_file(path: Path, options: AnalysisOptions):
    doc = DOMBuilder().load_file(path)
    options = options.model_copy(update={"base_path": doc.base_path})
    return await QNGINE(options).run(doc)


def handle_analyze(parsed_args: argparse.Namespace) -> int:
    """Analyses one HTML file and prints or writes the JSON report."""
    progress = tqdm(desc="Checking links", unit="link", leave=False, disable=parsed_args.quiet)

    def on_probe(done: int, total: int) -> None:
        progress.total = total
        progress.n = done
        progress.refresh()

    try:
        options = build_options(parsed_args, progress_callback=on_probe)
    except ValidationError as e:
        progress.close()
        print_invalid_options(e)
        return 1

    try:
        report = asyncio.run(_analyze_file(Path(parsed_args.file), options))
    except DictionaryLoadError as e:
        print(f"❌ {e}", file=sys.stderr)
        print("   Use --spelling heuristic or --dictionary <path/stem> to run without a system dictionary.",
              file=sys.stderr)
        return 2
    except FatalAnalysisError as e:
        print(f"❌ {e}", file=sys.stderr)
        return 1
    finally:
        progress.close()

    payload = json.dumps(report.to_payload(), indent=2, ensure_ascii=False)
    if parsed_args.output:
        Path(parsed_args.output).write_text(payload, encoding="utf-8")
        print(f"✅ Report written to {parsed_args.output}")
    else:
        print(payload)

    if parsed_args.export:
        try:
            written = ExportService().export(report, parsed_args.export)
        except (ValueError, OSError) as e:
            print(f"❌ Export failed: {e}", file=sys.stderr)
            return 1
        print(f"✅ Findings exported to {written}")

    return 0


def handle_serve(parsed_args: argparse.Namespace) -> int:
    """Starts the Flask analysis server."""
    from mail_auditor.server.app import create_app

    try:
        options = build_options(parsed_args)
    except ValidationError as e:
        print_invalid_options(e)
        return 1

    upload_dir = config_manager.get_nested("server.upload_dir")
    app = create_app(
        options=options,
        upload_dir=upload_dir,
        max_content_length_mb=int(config_manager.get_nested("server.max_content_length_mb", 10)),
    )

    host = parsed_args.host or config_manager.get_nested("server.host", "127.0.0.1")
    port = parsed_args.port or int(config_manager.get_nested("server.port", 5000))

    print("\n" + "=" * 50)
    print(f"🚀  MAILCHECK | http://{host}:{port}")
    print("=" * 50)
    for rule in app.url_map.iter_rules():
        if "static" not in str(rule):
            print(f"   ✅ {rule}")
    print("-" * 50 + "\n")

    app.run(host=host, port=port, debug=False, use_reloader=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="mailcheck", description="Audit HTML emails for authoring defects.")
    sub = parser.add_subparsers(dest="command", required=True)

    analyze = sub.add_parser("analyze", help="Analyse an HTML file and print the report as JSON.")
    analyze.add_argument("file", help="HTML file to analyse.")
    analyze.add_argument("--spelling", choices=["dictionary", "heuristic"], help="Spelling strategy.")
    analyze.add_argument("--dictionary", help="Hunspell dictionary path stem (without .aff/.dic).")
    analyze.add_argument("--no-probe", action="store_true", help="Do not probe external links.")
    analyze.add_argument("--max-probes", type=non_negative_int, help="Maximum number of external links to probe.")
    analyze.add_argument("--deadline", type=positive_float, help="Global deadline in seconds for all link probes.")
    analyze.add_argument("--output", "-o", help="Write the JSON report to this file.")
    analyze.add_argument("--export", help="Also export the findings to a .csv or .xlsx file.")
    analyze.add_argument("--quiet", "-q", action="store_true", help="Hide the progress bar.")
    analyze.set_defaults(handler=handle_analyze)

    serve = sub.add_parser("serve", help="Start the analysis web server.")
    serve.add_argument("--host", help="Host interface to bind to.")
    serve.add_argument("--port", type=int, help="Port to bind the server to.")
    serve.set_defaults(handler=handle_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    configure_logger(
        config_manager.get_nested("debug.level", "INFO"),
        module_specific_levels=config_manager.get_nested("debug.modules", {}),
        silenced_loggers=config_manager.get_nested("debug.silenced", {}),
    )
    parsed_args = build_parser().parse_args(argv)
    return parsed_args.handler(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
