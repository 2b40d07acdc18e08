import logging
from pythonjsonlogger import jsonlogger

_configured = False


def setup_logger(level: str = 'INFO') -> None:
    """Send JSON formatted records from every logger to stderr."""
    global _configured
    logger = logging.getLogger()
    logger.setLevel(level.upper())
    if _configured:
        return
    logHandler = logging.StreamHandler()
    formatter = jsonlogger.JsonFormatter('%(asctime)s %(levelname)s %(name)s %(message)s',
                                         rename_fields={'levelname': 'level', 'asctime': 'timestamp'})
    logHandler.setFormatter(formatter)
    logger.addHandler(logHandler)
    _configured = True
