import inspect
import logging

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO) -> None:
    """Configure root logging for command-line use"""
    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)


def get_caller_logger() -> logging.Logger:
    """Get logger for the calling module"""
    frame = inspect.currentframe()
    try:
        caller_frame = frame.f_back.f_back
        module_name = caller_frame.f_globals.get("__name__", "unknown")
        return logging.getLogger(module_name)
    finally:
        del frame


def log_info(operation: str, message: str) -> None:
    """Standardized info logging"""
    logger = get_caller_logger()
    logger.info(f"{operation}: {message}")


def log_warning(operation: str, message: str) -> None:
    """Standardized warning logging"""
    logger = get_caller_logger()
    logger.warning(f"{operation}: {message}")


def log_error(operation: str, error: Exception | str) -> None:
    """Standardized error logging"""
    logger = get_caller_logger()
    logger.error(f"{operation} error: {error}")


def format_error_message(message: str) -> str:
    """Format error messages consistently"""
    return f"error: {message}"
