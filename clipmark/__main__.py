"""CLI entry point: python -m clipmark [FILE|-] --url URL [options]"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

import yaml

from clipmark.clipper import MODES, ClipError, NoSelectionError, extract
from clipmark.extractors import dom
from clipmark.items import ExtractedContent
from clipmark.profiles import load_profile
from clipmark.templates import (
    DEFAULT_TEMPLATES,
    apply_template,
    get_default_template,
    get_template,
    template_variables,
)

logger = logging.getLogger(__name__)

FORMATS: tuple[str, ...] = ("markdown", "html", "json", "template")

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NO_SELECTION = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clipmark",
        description=(
            "Clip the readable content of a saved web page to Markdown.\n"
            "Reads HTML from FILE (or stdin) and writes the clip to stdout."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("file", nargs="?", default="-", metavar="FILE",
                        help="HTML file to clip, or '-' for stdin (default: -)")
    parser.add_argument("--url", required=True, metavar="URL",
                        help="Page URL, used to resolve relative links and pick site rules")
    parser.add_argument("--title", default=None, metavar="TITLE",
                        help="Page title (default: the document <title>)")
    parser.add_argument("--mode", choices=MODES, default=None,
                        help="Extraction mode (default: profile mode, else article)")
    parser.add_argument("--selector", default=None, metavar="CSS",
                        help="Selection container for --mode selection")
    parser.add_argument("--format", choices=FORMATS, default="markdown", dest="output_format",
                        help="Output format (default: markdown)")
    parser.add_argument("--template", default=None, metavar="ID",
                        help=(
                            "Template for --format template: "
                            + ", ".join(t.id for t in DEFAULT_TEMPLATES)
                            + " (default: profile template, else default)"
                        ))
    parser.add_argument("--note", default="", metavar="TEXT",
                        help="Note text for the {{note}} template variable")
    parser.add_argument("--profile", default=None, metavar="PATH",
                        help="YAML file with per-domain clip profiles")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        metavar="{DEBUG,INFO,WARNING,ERROR}",
                        help="Logging level (default: WARNING)")
    return parser


def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()


def _render(content: ExtractedContent, args: argparse.Namespace, profile: dict) -> str:
    if args.output_format == "html":
        return content.html
    if args.output_format == "json":
        return json.dumps(content.to_wire(), ensure_ascii=False, indent=2)
    if args.output_format == "template":
        template_id = args.template or profile.get("template")
        template = get_template(template_id) if template_id else get_default_template()
        if template is None:
            raise ClipError(f"Unknown template {template_id!r}", url=args.url)
        return apply_template(template, template_variables(content, note=args.note)).to_markdown()
    return content.markdown


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    profile: dict = {}
    if args.profile:
        try:
            profile = load_profile(args.profile, args.url)
        except (OSError, yaml.YAMLError) as exc:
            print(f"ERROR: Could not load profile {args.profile}: {exc}", file=sys.stderr)
            return EXIT_ERROR

    try:
        raw = _read_input(args.file)
    except OSError as exc:
        print(f"ERROR: Could not read {args.file}: {exc}", file=sys.stderr)
        return EXIT_ERROR

    mode = args.mode or profile.get("mode") or "article"
    soup = dom.parse_html(raw)

    selection = None
    if mode == "selection" and args.selector:
        matches = dom.select_safe(soup, args.selector)
        selection = matches[0] if matches else None

    try:
        content = extract(
            soup,
            args.url,
            mode=mode,
            title=args.title,
            profile=profile,
            selection=selection,
        )
        output = _render(content, args, profile)
    except NoSelectionError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_NO_SELECTION
    except (ClipError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    sys.stdout.write(output)
    if output and not output.endswith("\n"):
        sys.stdout.write("\n")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
