import logging


LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str = "INFO", verbose: bool = False) -> None:
    """Configure root logging once at process start.

    ``verbose`` forces DEBUG, which also logs every received message.
    """
    resolved = logging.DEBUG if verbose else getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=resolved, format=LOG_FORMAT, force=True)
    # Frame-level chatter from the websockets library is only useful when debugging it.
    logging.getLogger("websockets").setLevel(logging.INFO if verbose else logging.WARNING)
