"""CLI entry point del módulo edge."""

from __future__ import annotations

import argparse
import logging
import signal
import threading

from .config import get_settings
from .module import EdgeModule

logger = logging.getLogger(__name__)


def main() -> None:
    p = argparse.ArgumentParser(description="Edge telemetry filter / anomaly module")
    p.add_argument("--env-file", default=None, help="env file to load (default: $EDGE_ENV_FILE or .env)")
    p.add_argument("--log-level", default=None, help="override LOG_LEVEL")
    args = p.parse_args()

    settings = get_settings(args.env_file)

    logging.basicConfig(
        level=(args.log_level or settings.log_level).upper(),
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    module = EdgeModule(settings)
    if not module.start():
        raise SystemExit(1)

    stop = threading.Event()
    signal.signal(signal.SIGINT, lambda *_: stop.set())
    signal.signal(signal.SIGTERM, lambda *_: stop.set())

    # Esperar hasta que el proceso sea cancelado
    stop.wait()
    module.stop()


if __name__ == "__main__":  # pragma: no cover
    main()
