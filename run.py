"""mapgen CLI entry point.

Generates a dungeon map (optionally dumping the packed buffer, a seed file or
an ASCII preview) or runs the HTTP generation service. Accepts configuration
via flags and environment variables, with optional .env loading.

Exit codes: 0 success, 1 generation or export failed, 2 invalid parameters.

Run `python run.py --help` for details.
"""

import argparse
import json
import os
import sys
from textwrap import dedent

from colorama import Fore, Style
from colorama import init as _color_init
from dotenv import load_dotenv

_color_init()
# Disable colors if output is not a real terminal (e.g., during pytest capture)
_COLOR_ENABLED = sys.stdout.isatty()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INVALID = 2


def _load_version() -> str:
    try:
        with open(os.path.join(os.path.dirname(os.path.abspath(__file__)), "VERSION"), "r", encoding="utf-8") as f:
            return f.read().strip()
    except OSError:
        return "0.1.0"


__version__ = _load_version()


def parse_args(argv: list[str]) -> argparse.Namespace:
    description = """
    mapgen dungeon generator

    Generate a seeded tile dungeon or serve generation over HTTP. Options can
    come from CLI flags or MAPGEN_* environment variables; flags win.
    """

    epilog = dedent(
        """
        Environment variables:
          MAPGEN_SIZE         Default size preset (small|medium|large or 0..2)
          MAPGEN_HIDDEN       Default hidden-room level (low|med|high or 0..2)
          MAPGEN_NICHES       Default niche level
          MAPGEN_DECEPTION    Default deception-corridor level
          MAPGEN_LOG_LEVEL    debug|info|warn|error
          HOST / PORT         Bind address for the server (default 0.0.0.0:5000)

        Examples:
          # Generate with a fixed seed and print the map
          python run.py generate --seed 42 --ascii

          # Large, dense map written as a packed dump plus its seed file
          python run.py generate --size large --hidden high --niches high \\
              --deception high --out map.bin --seed-file map.seed

          # Serve the HTTP API on port 8080
          python run.py server --port 8080
        """
    )

    parser = argparse.ArgumentParser(
        prog="mapgen",
        description=dedent(description),
        epilog=epilog,
        formatter_class=argparse.RawTextHelpFormatter,
    )
    parser.add_argument(
        "--env-file",
        dest="env_file",
        help="Path to a .env file to load before processing flags",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"mapgen {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command")

    gen_parser = subparsers.add_parser(
        "generate",
        help="Generate one dungeon floor",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Generate a dungeon and optionally export it",
    )
    gen_parser.add_argument("--seed", default=None, help="Seed (integer or any string); random when omitted")
    gen_parser.add_argument("--size", default=None, help="small|medium|large or 0..2 (default: env or medium)")
    gen_parser.add_argument("--hidden", default=None, help="Hidden rooms: low|med|high or 0..2")
    gen_parser.add_argument("--niches", default=None, help="Niches: low|med|high or 0..2")
    gen_parser.add_argument("--deception", default=None, help="Deception corridors: low|med|high or 0..2")
    gen_parser.add_argument("--out", default=None, help="Write the packed tile buffer to this path")
    gen_parser.add_argument("--seed-file", dest="seed_file", default=None, help="Write seed + presets to this path")
    gen_parser.add_argument("--ascii", action="store_true", help="Print the map as ASCII")
    gen_parser.add_argument("--stats", action="store_true", help="Print map statistics as JSON")
    gen_parser.set_defaults(command="generate")

    server_parser = subparsers.add_parser(
        "server",
        help="Run the HTTP generation service",
        formatter_class=argparse.RawTextHelpFormatter,
        description="Run the Flask generation API",
    )
    server_parser.add_argument("--host", default=None, help="Host interface to bind (default: env HOST or 0.0.0.0)")
    server_parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: env PORT or 5000)")
    server_parser.add_argument("--debug", action="store_true", help="Enable Flask debug mode")
    server_parser.set_defaults(command="server")

    # If no subcommand provided, default to generate (after any global flags)
    if not {"generate", "server", "-h", "--help", "--version"} & set(argv):
        head, rest = [], list(argv)
        while rest and rest[0].startswith("--env-file"):
            flag = rest.pop(0)
            head.append(flag)
            if flag == "--env-file" and rest:
                head.append(rest.pop(0))
        argv = head + ["generate"] + rest

    return parser.parse_args(argv)


def _banner(rows, stream=None):
    title = f"{Fore.CYAN}{Style.BRIGHT}mapgen{Style.RESET_ALL}" if _COLOR_ENABLED else "mapgen"

    def label(text: str) -> str:
        return f"{Fore.YELLOW}{text}{Style.RESET_ALL}" if _COLOR_ENABLED else text

    def value(val) -> str:
        return f"{Fore.GREEN}{val}{Style.RESET_ALL}" if _COLOR_ENABLED else str(val)

    divider = (Fore.MAGENTA + "=" * 40 + Style.RESET_ALL) if _COLOR_ENABLED else "=" * 40
    lines = [divider, f"  {title}", divider]
    lines += [f"  {label(k + ':'):12} {value(v)}" for k, v in rows]
    lines += [divider, ""]
    print("\n".join(lines), file=stream or sys.stdout)


def _run_generate(args) -> int:
    from mapgen.dungeon import Generator, InvalidParameterError, MapConfig, map_statistics
    from mapgen.dungeon.export import save_packed_map, save_seed_file
    from mapgen.dungeon.errors import ExportError
    from mapgen.dungeon.render import render_ascii
    from mapgen.routes.seed_api import _coerce_seed

    env = os.environ
    try:
        config = MapConfig(
            args.size if args.size is not None else env.get("MAPGEN_SIZE", 1),
            args.hidden if args.hidden is not None else env.get("MAPGEN_HIDDEN", 0),
            args.niches if args.niches is not None else env.get("MAPGEN_NICHES", 0),
            args.deception if args.deception is not None else env.get("MAPGEN_DECEPTION", 0),
        )
    except InvalidParameterError as exc:
        print(f"[ERROR] {exc}", file=sys.stderr)
        return EXIT_INVALID
    seed = _coerce_seed(args.seed) if args.seed is not None else None

    gen = Generator(seed=seed, config=config)
    _banner(
        [
            ("Mode", "GENERATE"),
            ("Seed", "random" if seed is None else seed),
            ("Size", config.map_size.name),
            ("Hidden", config.hidden_rooms.name),
            ("Niches", config.niches.name),
            ("Deception", config.deception.name),
        ],
        stream=sys.stderr,
    )
    if not gen.generate():
        print(f"[ERROR] generation failed (seed {gen.seed}): {gen.last_error}", file=sys.stderr)
        return EXIT_FAILED

    # stdout carries only the requested map and stats so they can be piped
    print(
        f"seed={gen.seed} size={gen.width}x{gen.height} rooms={gen.room_count} corridors={gen.corridor_count}",
        file=sys.stderr,
    )
    if args.ascii:
        print("\n".join(render_ascii(gen.store)))
    if args.stats:
        print(json.dumps(map_statistics(gen), indent=2))
    try:
        if args.out:
            written = save_packed_map(gen, args.out)
            print(f"wrote {written} bytes to {args.out}", file=sys.stderr)
        if args.seed_file:
            save_seed_file(args.seed_file, gen.seed, config)
            print(f"wrote seed file {args.seed_file}", file=sys.stderr)
    except ExportError as exc:
        print(f"[ERROR] export failed: {exc}", file=sys.stderr)
        return EXIT_FAILED
    return EXIT_OK


def main(argv: list[str]) -> int:
    args = parse_args(argv)
    # Load .env if requested; otherwise the default .env if present
    if getattr(args, "env_file", None):
        load_dotenv(args.env_file)
    else:
        load_dotenv()

    mode = (getattr(args, "command", None) or "generate").lower()
    if mode == "generate":
        return _run_generate(args)

    host = getattr(args, "host", None) or os.getenv("HOST", "0.0.0.0")
    port = int(getattr(args, "port", None) or os.getenv("PORT", "5000"))
    debug = bool(getattr(args, "debug", False))

    # Import server entrypoint only after environment is ready
    from mapgen.server import start_server

    _banner([("Mode", mode.upper()), ("Host", host), ("Port", port), ("Debug", "YES" if debug else "NO")])
    start_server(host, port, debug)
    return EXIT_OK


def cli() -> None:
    raise SystemExit(main(sys.argv[1:]))


if __name__ == "__main__":
    cli()
