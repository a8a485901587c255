"""
Command-line entry point: `python -m snippetbox [--addr HOST:PORT]`.

--addr overrides the ADDR setting for this process only; everything else
still comes from the environment / .env file.
"""

import argparse

import uvicorn

from snippetbox.config import Settings
from snippetbox.main import create_app


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="snippetbox",
        description="Serve the Snippetbox web application.",
    )
    parser.add_argument(
        "--addr",
        default=None,
        help='HTTP network address, e.g. ":4000" or "127.0.0.1:9999" (default: ADDR setting)',
    )
    return parser.parse_args(argv)


def main(argv=None) -> None:
    args = parse_args(argv)
    settings = Settings(addr=args.addr) if args.addr else Settings()

    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        # Logging is configured by the app's lifespan
        log_config=None,
    )


if __name__ == "__main__":
    main()
