import sys

from mimecat.config import config_path, get_server_url


def print_config_hint() -> None:
    """Tell the user where the server URL comes from after a connection failure."""
    print(f"  server: {get_server_url()}", file=sys.stderr)
    print(f"  Set [server] url in {config_path()} or MIMECAT_SERVER.", file=sys.stderr)


def get_version() -> str:
    try:
        from importlib.metadata import version
        return version("mimecat")
    except Exception:
        return "unknown"
