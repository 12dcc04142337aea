import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """
    Configure le logging racine (stdout).
    Appelé une fois par create_app ; les appels suivants ajustent seulement le niveau.
    """
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=level.upper(),
            format=LOG_FORMAT,
            handlers=[logging.StreamHandler(sys.stdout)],
        )
    root.setLevel(level.upper())
