import logging
import sys
from tqdm import tqdm

DEFAULT_SILENCED_LOGGERS = {
    "asyncio": "WARNING",
    "playwright": "WARNING",
}


class LogWithTqdm(logging.Handler):
    """
    A custom logging handler that redirects logging output to `tqdm.write()`,
    so log records never tear through a running progress bar.
    """
    def emit(self, record):
        try:
            msg = self.format(record)
            tqdm.write(msg, file=sys.stderr)
            self.flush()
        except Exception:
            self.handleError(record)


def _to_level(level, fallback):
    if isinstance(level, str):
        return getattr(logging, level.upper(), fallback)
    return level if level is not None else fallback


def configure_logger(general_level='WARNING', module_specific_levels=None, silenced_loggers=None):
    """
    Configures the root logger and specific module loggers with a
    TQDM-friendly handler.
    """
    tqdm_aware_handler = LogWithTqdm()
    formatter = logging.Formatter(
        "%(asctime)s - %(levelname)s - [%(name)s:%(lineno)d] - %(message)s"
    )
    tqdm_aware_handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(_to_level(general_level, logging.WARNING))

    root_logger.handlers.clear()
    root_logger.addHandler(tqdm_aware_handler)

    if module_specific_levels:
        for name, level in module_specific_levels.items():
            logging.getLogger(name).setLevel(_to_level(level, logging.INFO))

    # Muzzle noisy loggers by setting their level high.
    silenced = dict(DEFAULT_SILENCED_LOGGERS)
    if silenced_loggers:
        silenced.update(silenced_loggers)
    for name, level in silenced.items():
        logging.getLogger(name).setLevel(_to_level(level, logging.CRITICAL))
