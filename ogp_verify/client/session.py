import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from ogp_verify.client.service import VerificationClient
from ogp_verify.core.models import VerificationRequest, VerificationResponse

logger = logging.getLogger(__name__)

UNKNOWN_ERROR = "An unknown error occurred"


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Pending:
    request: VerificationRequest


@dataclass(frozen=True)
class Resolved:
    response: VerificationResponse


@dataclass(frozen=True)
class Failed:
    message: str


SessionState = Union[Idle, Pending, Resolved, Failed]


class SessionView(BaseModel):
    """What a presenter sees of the session at any instant."""
    model_config = ConfigDict(frozen=True)

    data: Optional[VerificationResponse] = None
    loading: bool = False
    error: Optional[str] = None


Observer = Callable[[SessionView], None]


class VerificationSession:
    """
    Owns the lifecycle of a single verification: idle -> pending ->
    resolved/failed, with reset back to idle from anywhere.

    Every start() tags its call with a new generation number. A completion
    is applied only while its generation is still the current one, so a slow
    superseded call can never overwrite a newer state. reset() bumps the
    generation too, which is the only cancellation it offers; the network
    operation itself keeps running.

    All transitions run on the asyncio loop that start() is called from.
    """

    def __init__(self, client: VerificationClient):
        self._client = client
        self._state: SessionState = Idle()
        self._generation = 0
        self._observers: List[Observer] = []

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def view(self) -> SessionView:
        state = self._state
        if isinstance(state, Pending):
            return SessionView(loading=True)
        if isinstance(state, Resolved):
            return SessionView(data=state.response)
        if isinstance(state, Failed):
            return SessionView(error=state.message)
        return SessionView()

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register an observer called with the new view after every transition."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _transition(self, state: SessionState) -> None:
        logger.debug(f"Session transition: {type(self._state).__name__} -> {type(state).__name__}")
        self._state = state
        view = self.view
        for observer in list(self._observers):
            try:
                observer(view)
            except Exception:
                logger.exception(f"Session observer {observer!r} failed")

    def start(self, raw_url: str) -> Optional["asyncio.Task[None]"]:
        """
        Begin verifying raw_url.

        Surrounding whitespace is trimmed; a blank URL is ignored and None is
        returned. Otherwise the session moves to pending immediately and the
        returned task completes once the outcome has been applied (or dropped,
        if superseded). Must be called from a running event loop.
        """
        url = (raw_url or "").strip()
        if not url:
            logger.debug("Ignoring blank URL")
            return None

        loop = asyncio.get_running_loop()
        self._generation += 1
        request = VerificationRequest(url=url)
        self._transition(Pending(request))
        return loop.create_task(self._run(self._generation, request))

    def reset(self) -> None:
        """Return to idle and ignore any call still in flight."""
        self._generation += 1
        self._transition(Idle())

    async def _run(self, generation: int, request: VerificationRequest) -> None:
        try:
            response = await self._client.call(request)
        except Exception as e:
            if generation != self._generation:
                logger.debug(f"Dropping failure of superseded call {generation} for {request.url}")
                return
            logger.warning(f"Verification of {request.url} failed: {e}")
            self._transition(Failed(str(e) or UNKNOWN_ERROR))
            return

        if generation != self._generation:
            logger.debug(f"Dropping result of superseded call {generation} for {request.url}")
            return
        self._transition(Resolved(response))
