from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from models.playback_models import NotificationKind, SynthesisNotification
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable

    from models.config_models import Engine
    from models.voice_models import VoiceDescriptor


__all__: list[str] = [
    "BlockNotFoundError",
    "EngineNotReadyError",
    "InitializationFailureError",
    "Interface",
    "NotificationSink",
    "SynthesisFailureError",
    "TTSExceptionError",
]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

type NotificationSink = Callable[[SynthesisNotification], None]


class TTSExceptionError(Exception):
    """Base class for speech playback exceptions."""


class EngineNotReadyError(TTSExceptionError):
    """Playback was requested before the engine reported ready, or after it failed to start.

    Raising it never changes the playback state.
    """


class BlockNotFoundError(TTSExceptionError):
    """A block id could not be resolved.

    Playback never lets it escape: start and end ids fall back to the first or last block,
    and an unknown jump target is ignored.
    """


class SynthesisFailureError(TTSExceptionError):
    """The engine reported an error for an utterance.

    Attributes:
        correlation_id (int | None): Id of the failed utterance.
        code (int | None): Engine specific error code.
    """

    def __init__(self, message: str, *, correlation_id: int | None = None, code: int | None = None) -> None:
        super().__init__(message)
        self.correlation_id: int | None = correlation_id
        self.code: int | None = code

    @classmethod
    def from_notification(cls, notification: SynthesisNotification) -> SynthesisFailureError:
        message: str = f"TTS error: code {notification.code}" if notification.code is not None else "TTS error"
        if notification.message:
            message = f"{message} ({notification.message})"
        return cls(message, correlation_id=notification.correlation_id, code=notification.code)


class InitializationFailureError(TTSExceptionError):
    """The synthesis engine could not be started."""


class Interface(ABC):
    """Base class for synthesis engines.

    An engine speaks one utterance at a time and reports progress asynchronously, possibly
    from a thread of its own, through the sink installed with bind(). Subclasses register
    themselves under fetch_engine_name() when they are defined.

    Contract:
        - initialize() completes once, returning the installed voices or raising
          InitializationFailureError.
        - speak() is fire-and-forget and always discards any prior pending utterance.
        - set_voice() / set_rate() affect subsequent speak() calls only.
        - stop() is a best-effort cancellation of the current utterance.

    Attributes:
        _registered_engines (dict[str, type[Interface]]): Engine classes by name.
    """

    _registered_engines: ClassVar[dict[str, type[Interface]]] = {}

    def __init__(self) -> None:
        self._sink: NotificationSink | None = None
        self._base_rate: int = 0

    def __init_subclass__(cls, **kwargs) -> None:
        super().__init_subclass__(**kwargs)
        cls.register_engine(cls)

    @classmethod
    def get_registered(cls) -> dict[str, type[Interface]]:
        return cls._registered_engines

    @classmethod
    def register_engine(cls, engine_cls: type[Interface]) -> None:
        """Register an engine class under its distinguished name."""
        if not issubclass(engine_cls, Interface):
            msg = "Must be a subclass of Interface"
            raise TypeError(msg)
        name: str = engine_cls.fetch_engine_name()
        Interface._registered_engines[name] = engine_cls
        logger.debug("Registered engine: %s", name)

    @classmethod
    def get_engine(cls, name: str) -> type[Interface]:
        """Retrieve a registered engine class by name.

        Raises:
            ValueError: If no engine is registered under the name.
        """
        try:
            return cls._registered_engines[name]
        except KeyError:
            msg: str = f"No such engine registered: {name}"
            raise ValueError(msg) from None

    def configure(self, engine_config: Engine) -> None:
        """Apply the ENGINE config section (override to read more settings)."""
        if engine_config.BASE_RATE < 0:
            msg: str = f"BASE_RATE must not be negative: {engine_config.BASE_RATE}"
            raise ValueError(msg)
        self._base_rate = engine_config.BASE_RATE

    def bind(self, sink: NotificationSink) -> None:
        """Install the receiver of progress notifications. May be called from any thread."""
        self._sink = sink

    def notify_started(self, utterance_id: str | int | None) -> None:
        self._emit(SynthesisNotification(NotificationKind.STARTED, self.parse_correlation_id(utterance_id)))

    def notify_done(self, utterance_id: str | int | None) -> None:
        self._emit(SynthesisNotification(NotificationKind.DONE, self.parse_correlation_id(utterance_id)))

    def notify_error(self, utterance_id: str | int | None, code: int | None = None, message: str = "") -> None:
        self._emit(
            SynthesisNotification(
                NotificationKind.ERROR, self.parse_correlation_id(utterance_id), code=code, message=message
            )
        )

    def _emit(self, notification: SynthesisNotification) -> None:
        if self._sink is None:
            logger.warning("Notification dropped, no sink bound: %s", notification)
            return
        self._sink(notification)

    @staticmethod
    def parse_correlation_id(utterance_id: str | int | None) -> int | None:
        """Convert an utterance name back to a block id; None when it is not an integer."""
        if utterance_id is None:
            return None
        try:
            return int(utterance_id)
        except (TypeError, ValueError):
            logger.debug("Unparseable utterance id: %r", utterance_id)
            return None

    @staticmethod
    @abstractmethod
    def fetch_engine_name() -> str:
        """Distinguished name used in the ENGINE.NAME setting."""
        raise NotImplementedError

    @abstractmethod
    async def initialize(self) -> list[VoiceDescriptor]:
        """Start the engine.

        Returns:
            list[VoiceDescriptor]: Voices known to the engine, unfiltered.

        Raises:
            InitializationFailureError: If the engine cannot be started.
        """
        raise NotImplementedError

    @abstractmethod
    def speak(self, text: str, correlation_id: int) -> None:
        """Submit an utterance, discarding whatever was pending or playing."""
        raise NotImplementedError

    @abstractmethod
    def set_voice(self, identifier: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def set_rate(self, rate: float) -> None:
        """Set the speech rate multiplier (1.0 is the engine's normal speed)."""
        raise NotImplementedError

    @abstractmethod
    def stop(self) -> None:
        raise NotImplementedError

    async def shutdown(self) -> None:
        """Release engine resources (override if necessary)."""
        logger.info("%s shut down", self.__class__.__name__)
