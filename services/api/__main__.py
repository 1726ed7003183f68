"""
Entry point: python -m services.api
"""

import uvicorn

from .main import app, config


def main() -> None:
    # No Server / X-Powered-By style headers on responses.
    uvicorn.run(app, host=config.HOST, port=config.PORT, server_header=False)


if __name__ == "__main__":
    main()
