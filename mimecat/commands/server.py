"""mimecat server: serve classification and category editing over HTTP."""
from __future__ import annotations

import os
import sys

from mimecat.config import get_categories_path
from mimecat.settings import TomlCategoryStore


def cmd_server(args) -> None:
    try:
        import uvicorn
    except ImportError:
        print("mimecat: uvicorn not installed. Run: pip install uvicorn[standard]", file=sys.stderr)
        sys.exit(1)

    categories_path = getattr(args, "categories", None)
    if categories_path:
        # Read by get_categories_path() in this process and in uvicorn's reload workers
        os.environ["MIMECAT_CATEGORIES_PATH"] = os.path.abspath(os.path.expanduser(categories_path))

    path = get_categories_path()
    # Fail here, not on the first request, if the file is malformed
    count = len(TomlCategoryStore(path).load())
    if count:
        print(f"Serving {count} categories from {path}", flush=True)
    else:
        print(f"No categories in {path} yet; the built-in set will be installed", flush=True)

    host_bind = getattr(args, "host", "127.0.0.1")
    port = getattr(args, "port", 8770)
    print(f"Starting mimecat server on {host_bind}:{port}", flush=True)

    uvicorn.run(
        "server.main:app",
        host=host_bind,
        port=port,
        reload=getattr(args, "reload", False),
    )
