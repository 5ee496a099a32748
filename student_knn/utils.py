import logging
from pathlib import Path


def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure logging for the student_knn package.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("student_knn")
    logger.setLevel(getattr(logging, log_level.upper()))

    handler = logging.StreamHandler()
    handler.setLevel(getattr(logging, log_level.upper()))

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)

    # Avoid duplicate handlers
    if not logger.handlers:
        logger.addHandler(handler)

    return logger


def project_root():
    # student_knn/ -> project root
    return Path(__file__).resolve().parents[1]


def results_dir():
    d = project_root() / "results"
    d.mkdir(parents=True, exist_ok=True)
    return d


def parse_grid(grid_str):
    return [int(x) for x in grid_str.split(",") if x.strip()]
