import logging

from corel import settings


LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s]: %(message)s"

__done_setup_logging = False
def has_setup_logging() -> bool:
    return __done_setup_logging

def setup_logging(level: int | None = None) -> None:
    '''
    Attach a stream handler to the package logger. Only the first call has any effect.
    '''
    global __done_setup_logging
    if __done_setup_logging:
        return
    __done_setup_logging = True

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger('corel')
    logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL if level is None else level)
