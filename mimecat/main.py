"""CLI entry point: dispatches mimecat subcommands."""
import argparse
import logging
import sys

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore[no-redef]

from mimecat.commands import get_version


def main() -> None:
    parser = argparse.ArgumentParser(
        prog="mimecat",
        description="Classify filenames into MIME categories",
    )
    parser.add_argument("--debug", action="store_true", help="Log debug messages to stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    sub = parser.add_subparsers(dest="command", metavar="COMMAND")

    # mimecat classify
    p_classify = sub.add_parser("classify", help="Print the category of each filename")
    p_classify.add_argument("names", nargs="+", metavar="NAME", help="Filenames or paths")
    p_classify.add_argument("-v", "--verbose", action="store_true",
                            help="Also show the matching pattern and suffix")
    p_classify.add_argument("--remote", action="store_true",
                            help="Ask the configured server instead of classifying locally")

    # mimecat categories
    p_categories = sub.add_parser("categories", help="List the configured categories")
    p_categories.add_argument("-p", "--patterns", action="store_true",
                              help="Show the patterns of each category")
    p_categories.add_argument("--remote", action="store_true",
                              help="List the categories of the configured server")
    p_categories.add_argument("--push", action="store_true",
                              help="Replace the server's categories with the local ones")

    # mimecat scan
    p_scan = sub.add_parser("scan", help="Summarize disk usage per category",
                            conflict_handler="resolve")
    p_scan.add_argument("path", nargs="?", default=".", help="Directory to scan (default: .)")
    p_scan.add_argument("-h", dest="human", action="store_true", help="Human-readable sizes")
    p_scan.add_argument("-j", "--workers", type=int, default=None,
                        help="Number of scanner threads (default: from config, 4)")
    p_scan.add_argument("-x", "--one-filesystem", dest="one_filesystem", action="store_true",
                        help="Don't cross filesystem boundaries")
    p_scan.add_argument("-s", "--suffixes", action="store_true",
                        help="Break the totals down by matched suffix")

    # mimecat server
    p_server = sub.add_parser("server", help="Start the mimecat server")
    p_server.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    p_server.add_argument("--port", type=int, default=8770, help="Port (default: 8770)")
    p_server.add_argument("--categories", default=None, metavar="PATH",
                          help="Categories file (default: from config, ~/.mimecat.categories)")
    p_server.add_argument("--reload", action="store_true", help="Enable auto-reload (dev only)")

    args = parser.parse_args()

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format="%(levelname)s [%(name)s] %(message)s",
    )

    try:
        if args.command == "classify":
            from mimecat.commands.classify import cmd_classify
            cmd_classify(args)
        elif args.command == "categories":
            from mimecat.commands.categories import cmd_categories
            cmd_categories(args)
        elif args.command == "scan":
            from mimecat.commands.scan import cmd_scan
            cmd_scan(args)
        elif args.command == "server":
            from mimecat.commands.server import cmd_server
            cmd_server(args)
        else:
            parser.print_help()
            sys.exit(1)
    except KeyboardInterrupt:
        sys.stderr.write("\n")
        sys.exit(130)
    except (OSError, tomllib.TOMLDecodeError) as e:
        print(f"mimecat: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
