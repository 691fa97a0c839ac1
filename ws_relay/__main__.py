import argparse
import logging
import sys

from .config import RESPONDER_KINDS, ConfigError, RelayConfig
from .log import configure_logging
from .server import run


LOGGER = logging.getLogger("ws_relay")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="ws-relay", description="WebSocket relay with origin check")
    p.add_argument("-v", "--verbose", action="store_true", help="debug logging, including every message")
    p.add_argument("--host", help="listen address (HOST)")
    p.add_argument("--port", type=int, help="listen port (PORT)")
    p.add_argument("--responder", choices=RESPONDER_KINDS, help="reply source (RESPONDER)")
    p.add_argument(
        "--no-origin-check",
        action="store_true",
        help="admit every origin (CHECK_ORIGIN=false)",
    )
    p.add_argument("--env-file", help="dotenv file to load instead of ./.env")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = RelayConfig.from_env(env_file=args.env_file).with_overrides(
            host=args.host,
            port=args.port,
            responder=args.responder,
            check_origin=False if args.no_origin_check else None,
        )
        configure_logging(config.log_level, verbose=args.verbose)
        config.validate()
    except ConfigError as exc:
        configure_logging(verbose=args.verbose)
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
