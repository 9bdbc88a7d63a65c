"""Web server entry point for the Ledger1 CMS API"""

import socket
import sys

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file BEFORE reading settings
load_dotenv()

from cms.utils.config import load_settings
from cms.utils.exceptions import ConfigError
from cms.utils.logger import setup_logger


def _port_in_use(host: str, port: int) -> bool:
    """Return True if the given port is already in use."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return False
        except OSError:
            return True


def main() -> int:
    try:
        settings = load_settings()
    except ConfigError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    setup_logger(
        log_level=settings.logging.level,
        log_format=settings.logging.format,
        file_path=settings.logging.file_path,
        max_bytes=settings.logging.max_bytes,
        backup_count=settings.logging.backup_count,
    )

    host = settings.web.host
    port = settings.web.port
    if _port_in_use(host, port):
        print(f"Port {port} is in use. Stop the process using it or set WEB_PORT.", file=sys.stderr)
        return 1

    print(f"Starting Ledger1 CMS API on http://{host}:{port}")
    uvicorn.run(
        "cms_web.main:create_app",
        factory=True,
        host=host,
        port=port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
