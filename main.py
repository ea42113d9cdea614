import os
import signal
import sys
import traceback
from pathlib import Path

import uvicorn
from dotenv import load_dotenv

# Load .env before reading PORT/HOST/ENVIRONMENT
env_path = Path(__file__).resolve().parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from catalog.utils.config import load_settings
from catalog.utils.logger import get_logger, setup_logging

logger = get_logger(__name__)


def _unhandled_exception(exc_type, exc_value, exc_tb):
    """Log unhandled exceptions before the process exits."""
    if exc_type is KeyboardInterrupt:
        sys.__excepthook__(exc_type, exc_value, exc_tb)
        return
    msg = "".join(traceback.format_exception(exc_type, exc_value, exc_tb))
    logger.error("Unhandled exception", traceback=msg)
    sys.__excepthook__(exc_type, exc_value, exc_tb)


def main() -> None:
    """
    Entry point for the mock catalog API.
    Serves mock_api.app on HOST:PORT (default 127.0.0.1:3333).
    """
    root_dir = os.path.dirname(os.path.abspath(__file__))
    sys.path.insert(0, root_dir)
    sys.excepthook = _unhandled_exception

    settings = load_settings()
    setup_logging(
        level=settings.logging.level,
        fmt=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )

    host = settings.server.host
    port = settings.server.port
    reload = settings.app.environment.lower() == "development"
    # create_app() reads the database path from the environment
    os.environ.setdefault("CATALOG_DB_PATH", settings.server.db_path)

    print(f"Starting Store Catalog mock API from {root_dir}...")
    print(f"Environment: {settings.app.environment}")
    print(f"JSON Server is running on http://{host}:{port}")
    print("Press CTRL+C to stop the server")

    def signal_handler(sig, frame):
        print("\n\nShutdown signal received. Stopping server...")
        sys.exit(0)

    signal.signal(signal.SIGINT, signal_handler)
    if hasattr(signal, "SIGTERM"):
        signal.signal(signal.SIGTERM, signal_handler)

    try:
        uvicorn.run(
            "mock_api.app:create_app",
            factory=True,
            host=host,
            port=port,
            reload=reload,
            log_level=settings.logging.level.lower(),
        )
    except KeyboardInterrupt:
        print("\n\nShutdown complete.")


if __name__ == "__main__":
    main()
