import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once at application startup."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
