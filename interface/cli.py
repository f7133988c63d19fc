import argparse
import json
import logging
import sys
import requests
from requests.exceptions import RequestException

from blueprint.render import render_blueprint, render_svg
from blueprint.schema import InvalidBlueprintError, parse_blueprint

log = logging.getLogger(__name__)


def _read_source(path):
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_render(args):
    try:
        data = _read_source(args.file)
    except OSError as e:
        log.error("Failed to read blueprint file %s: %s", args.file, e)
        return 1
    try:
        svg = render_blueprint(data)
    except InvalidBlueprintError as e:
        log.error("%s: %s", args.file, e)
        for err in e.errors:
            loc = ".".join(str(p) for p in err.get("loc", ())) or "<root>"
            log.error("  %s: %s", loc, err.get("msg"))
        return 1
    print(svg)
    return 0


def cmd_generate(args):
    url = f"{args.api.rstrip('/')}/api/blueprint"
    try:
        resp = requests.post(url, json={"prompt": args.prompt}, timeout=args.timeout)
        resp.raise_for_status()
        data = resp.json()
    except (RequestException, ValueError) as e:
        log.error("Request to %s failed: %s", url, e)
        return 1

    if args.json:
        print(json.dumps(data, indent=2))
        return 0
    try:
        blueprint = parse_blueprint(json.dumps(data))
    except InvalidBlueprintError as e:
        log.error("Service returned an unusable blueprint: %s", e)
        return 1
    print(render_svg(blueprint))
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description="Render floor-plan blueprints as SVG")
    sub = parser.add_subparsers(dest="command", required=True)

    p_render = sub.add_parser("render", help="Render a blueprint JSON file to SVG on stdout")
    p_render.add_argument("file", help="Path to blueprint JSON, or - for stdin")
    p_render.set_defaults(func=cmd_render)

    p_gen = sub.add_parser("generate", help="Generate a blueprint from a prompt via the API")
    p_gen.add_argument("prompt", help="Description of the desired layout")
    p_gen.add_argument(
        "--api",
        default="http://localhost:5000",
        help="Base URL of the blueprint API",
    )
    p_gen.add_argument(
        "--timeout", type=float, default=90.0, help="Request timeout in seconds"
    )
    p_gen.add_argument(
        "--json", action="store_true", help="Print the blueprint JSON instead of SVG"
    )
    p_gen.set_defaults(func=cmd_generate)
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
