from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

ROOT_LOGGER_NAME = "trackscope"


def configure_logging(level: int = logging.INFO, logs_dir: str | Path | None = None) -> logging.Logger:
    """Installe les handlers du logger "trackscope" (stream + fichier optionnel).

    La bibliotheque n'installe jamais de handler a l'import ; a appeler par l'application.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    # Evite les handlers en double (rechargement, runner de tests).
    logger.handlers.clear()

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(level)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if logs_dir is not None:
        logs_path = Path(logs_dir)
        logs_path.mkdir(parents=True, exist_ok=True)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = logs_path / f"trackscope_{timestamp}.log"

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
        logger.info("log_file=%s", str(log_path))

    return logger
