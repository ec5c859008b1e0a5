import logging

from clubhub.config import Environment, environment


def create_logger(level: int) -> logging.Logger:
    log_format = "[%(asctime)s] [%(name)s] [%(process)d] [%(levelname)s] %(message)s"
    formatter = logging.Formatter(log_format, datefmt="%Y-%m-%d %H:%M:%S %z")

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    logger = logging.getLogger("clubhub")
    logger.setLevel(level)
    if not logger.handlers:
        logger.addHandler(handler)

    return logger


logger = create_logger(logging.DEBUG if environment is Environment.DEVELOPMENT else logging.INFO)
