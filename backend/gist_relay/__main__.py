"""
Local development server: `python -m gist_relay`.

Serves the relay on http://127.0.0.1:3030/api, the address the notebook's
dev server proxies `/api` to.
"""

import uvicorn

from gist_relay.config import settings


def main() -> None:
    uvicorn.run(
        "gist_relay.main:app",
        host=settings.backend_host,
        port=settings.backend_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
