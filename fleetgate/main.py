"""FleetGate entrypoint."""

import argparse

import uvicorn

from fleetgate.config.settings import get_settings


def cli(argv: list[str] | None = None) -> None:
    """Serve the API with uvicorn; auto-reload follows DEBUG unless overridden."""
    parser = argparse.ArgumentParser(prog="fleetgate", description="Run the FleetGate API.")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action=argparse.BooleanOptionalAction, default=None)
    args = parser.parse_args(argv)

    reload = get_settings().debug if args.reload is None else args.reload
    uvicorn.run(
        "fleetgate.web.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=reload,
    )


if __name__ == "__main__":
    cli()
