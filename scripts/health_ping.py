#!/usr/bin/env python3
"""Send one keep-alive request to the task API; meant to run from cron.

Exit code is 0 when the API answered with a 2xx status, 1 otherwise.
"""

import asyncio
import logging
import sys

from taskboard.core.config import settings
from taskboard.jobs.health_ping import send_random_request


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="%(message)s")
    result = asyncio.run(send_random_request(settings.api_base_url))
    return 0 if result.success else 1


if __name__ == "__main__":
    sys.exit(main())
