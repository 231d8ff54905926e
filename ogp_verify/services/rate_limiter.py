import logging
import time
from typing import Callable, Dict, Tuple

from ogp_verify.core.config import config

logger = logging.getLogger(__name__)


class RateLimiter:
    """
    Fixed-window request limiter keyed by client address.

    Each client may make `max_requests` requests per `window` seconds; the
    window restarts on the first request after it has elapsed.
    """

    def __init__(
        self,
        max_requests: int = config.RATE_LIMIT_REQUESTS,
        window: float = config.RATE_LIMIT_WINDOW,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window = window
        self.clock = clock
        # client -> (request count, window start)
        self.clients: Dict[str, Tuple[int, float]] = {}

    def allow(self, client: str) -> bool:
        now = self.clock()
        count, started = self.clients.get(client, (0, now))

        if now - started >= self.window:
            count, started = 0, now

        if count >= self.max_requests:
            logger.warning(f"Rate limit exceeded for client {client}")
            return False

        self.clients[client] = (count + 1, started)
        return True

    def reset(self) -> None:
        self.clients.clear()
