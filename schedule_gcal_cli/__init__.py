"""CLI package for the schedule sync tool."""

import logging
import sys

from schedule_gcal.config import SyncConfig

FILE_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"
CONSOLE_LOG_FORMAT = "%(levelname)s: %(message)s"

# Third-party loggers that are too chatty for the console
NOISY_LOGGERS = ("httpx", "httpcore")


def _console_level(verbose: bool, quiet: bool) -> int:
    if quiet:
        return logging.ERROR
    if verbose:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    verbose: bool = False, quiet: bool = False, config: SyncConfig | None = None
) -> None:
    """Send everything to the log file and warnings (or more) to stderr.

    Args:
        verbose: If True, show INFO messages on the console
        quiet: If True, only show errors on the console (wins over verbose)
        config: Optional SyncConfig for log directory/filename settings
    """
    if config is None:
        config = SyncConfig.from_env()

    config.log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(config.log_dir / config.log_filename)
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT))
    file_handler.setLevel(logging.DEBUG)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(logging.Formatter(CONSOLE_LOG_FORMAT))
    console_handler.setLevel(_console_level(verbose, quiet))

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    # Replace handlers from an earlier invocation in the same process
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        if isinstance(handler, logging.FileHandler):
            handler.close()
    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def main() -> None:
    """Main entry point for the CLI."""
    from schedule_gcal_cli.parser import app

    app()


__all__ = ["main", "setup_logging"]
