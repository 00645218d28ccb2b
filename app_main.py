"""Application entry point for the TimedExam API server."""

from __future__ import annotations

import os
from pathlib import Path

from exam_app.constants.about import APP_NAME
from exam_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from exam_app.constants.storage_constants import DEFAULT_DATA_DIR
from exam_app.core.exam_manager import ExamManager
from exam_app.core.services.exam_store import JsonFileExamStore
from exam_app.server.api_server import run_api_server
from exam_app.utils.logging_config import configure_logging


def main() -> None:
    """Initialize logging, wire the file-backed store and serve the API."""
    log_level = os.environ.get("EXAM_APP_LOG_LEVEL", "INFO")
    host = os.environ.get("EXAM_APP_HOST", DEFAULT_HOST)
    port = int(os.environ.get("EXAM_APP_PORT", DEFAULT_PORT))
    data_dir = Path(os.environ.get("EXAM_APP_DATA_DIR", DEFAULT_DATA_DIR))

    logger = configure_logging(log_level)
    logger.info("Starting %s on http://%s:%d (data in %s)", APP_NAME, host, port, data_dir)

    exam_manager = ExamManager(store=JsonFileExamStore(data_dir))
    run_api_server(exam_manager, host=host, port=port, log_level=log_level.lower())


if __name__ == "__main__":
    main()
