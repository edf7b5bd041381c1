import logging
import sys
from pathlib import Path

# Directory for log files, created on first setup
log_dir = Path(__file__).parent


# Configure logging to file and console
def setup_logging(directory: Path = log_dir, level: int = logging.INFO) -> logging.Logger:
    logger = logging.getLogger("api_logger")
    logger.setLevel(level)
    logger.propagate = False

    # Re-running setup replaces handlers instead of stacking them
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')

    directory.mkdir(parents=True, exist_ok=True)
    file_handler = logging.FileHandler(directory / "api_requests.log", encoding="utf-8")
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.addHandler(console_handler)

    return logger


api_logger = setup_logging()
