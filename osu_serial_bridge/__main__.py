from __future__ import annotations

from loguru import logger

from .bridge import Bridge
from .logs import setup_logging


def main() -> int:
    setup_logging()
    bridge = Bridge()
    try:
        bridge.run()
    except KeyboardInterrupt:
        logger.info("interrupted by user")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
