import logging
import sys
from loguru import logger


class InterceptHandler(logging.Handler):
    """Routes stdlib logging records (uvicorn, sqlalchemy, alembic) into loguru."""

    def emit(self, record):
        try:
            level = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        # Walk back past the logging module so loguru reports the real caller
        frame, depth = logging.currentframe(), 2
        while frame.f_back and frame.f_code.co_filename == logging.__file__:
            frame = frame.f_back
            depth += 1

        logger.opt(depth=depth, exception=record.exc_info).log(
            level, record.getMessage()
        )


def setup_logging(debug: bool = False, log_file: str = "logs/application.log"):
    level = "DEBUG" if debug else "INFO"

    logging.basicConfig(handlers=[InterceptHandler()], level=level, force=True)
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        logging.getLogger(name).handlers = [InterceptHandler()]
        logging.getLogger(name).propagate = False

    logger.remove()
    logger.add(sys.stderr, level=level)
    logger.add(
        log_file,
        rotation="500 MB",
        compression="zip",
        level="INFO",
        backtrace=True,
        # Tracebacks with variable values may contain passwords and tokens
        diagnose=False,
    )
