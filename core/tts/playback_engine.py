from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Final

from core.tts.interface import BlockNotFoundError, EngineNotReadyError, SynthesisFailureError
from models.playback_models import NotificationKind, PlaybackState
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Callable, Iterable

    from core.tts.interface import Interface
    from handlers.text_preprocessor import TextPreprocessor
    from models.playback_models import Block, SynthesisNotification
    from models.voice_models import VoiceCatalogEntry


__all__: list[str] = ["MAX_SPEECH_RATE", "MIN_SPEECH_RATE", "PlaybackCallbacks", "PlaybackEngine"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

MIN_SPEECH_RATE: Final[float] = 0.5
MAX_SPEECH_RATE: Final[float] = 3.0
DEFAULT_SPEECH_RATE: Final[float] = 1.0


def _ignore(*_args: object) -> None:
    return None


@dataclass(frozen=True)
class PlaybackCallbacks:
    """Events reported to the owner of a playback session. Every handler is optional."""

    on_ready: Callable[[list[VoiceCatalogEntry]], None] = field(default=_ignore)
    on_block_started: Callable[[int], None] = field(default=_ignore)
    on_block_completed: Callable[[int], None] = field(default=_ignore)
    on_playback_completed: Callable[[], None] = field(default=_ignore)
    on_error: Callable[[str], None] = field(default=_ignore)


class PlaybackEngine:
    """Block sequencer driving a synthesis engine.

    Walks an ordered block list from a start index to an end index, one utterance per block,
    with the block id as correlation id. Engine notifications may arrive on any thread; they are
    posted to an asyncio queue and applied one at a time by notification_processor(), so that all
    state mutation happens on the event loop.

    Only the utterance in flight is acted upon. stop(), pause() and jump_to_block() retire it,
    which makes any late STARTED/DONE/ERROR for it stale.
    """

    def __init__(
        self, engine: Interface, preprocessor: TextPreprocessor, callbacks: PlaybackCallbacks | None = None
    ) -> None:
        self.engine: Interface = engine
        self.preprocessor: TextPreprocessor = preprocessor
        self.callbacks: PlaybackCallbacks = callbacks or PlaybackCallbacks()

        self._blocks: list[Block] = []
        self._current_index: int = 0
        self._end_index: int = -1
        self._paused_index: int | None = None
        self._state: PlaybackState = PlaybackState.IDLE
        self._speech_rate: float = DEFAULT_SPEECH_RATE
        self._current_voice: str | None = None
        self._ready: bool = False
        self._in_flight: int | None = None
        self._interrupted: int | None = None

        self._notifications: asyncio.Queue[SynthesisNotification] = asyncio.Queue()
        self._loop: asyncio.AbstractEventLoop | None = None
        self.engine.bind(self.post_notification)

    @property
    def state(self) -> PlaybackState:
        return self._state

    @property
    def blocks(self) -> tuple[Block, ...]:
        return tuple(self._blocks)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def end_index(self) -> int:
        return self._end_index

    @property
    def paused_index(self) -> int | None:
        return self._paused_index

    @property
    def speech_rate(self) -> float:
        return self._speech_rate

    @property
    def current_voice(self) -> str | None:
        return self._current_voice

    @property
    def is_ready(self) -> bool:
        return self._ready

    def mark_ready(self) -> None:
        """Record that the engine finished initializing. Playback is rejected until then."""
        logger.debug("Playback engine ready")
        self._ready = True

    def start_playback(self, blocks: Iterable[Block], start_id: int, end_id: int | None = None) -> None:
        """Start speaking blocks from start_id through end_id (inclusive).

        Args:
            blocks (Iterable[Block]): Blocks in reading order.
            start_id (int): Id of the first block. An unknown id starts at the first block.
            end_id (int | None): Id of the last block. None or an unknown id ends at the last block.

        Raises:
            EngineNotReadyError: If the engine is not ready. The session is left untouched.
        """
        self._require_ready("start playback")
        self._blocks = list(blocks)
        self._current_index = self._resolve_index(start_id, fallback=0, label="start")
        last_index: int = len(self._blocks) - 1
        self._end_index = last_index if end_id is None else self._resolve_index(end_id, fallback=last_index, label="end")
        self._paused_index = None
        logger.info(
            "Starting playback of %d block(s), index %d to %d",
            len(self._blocks),
            self._current_index,
            self._end_index,
        )
        self._set_state(PlaybackState.PLAYING)
        self.engine.set_rate(self._speech_rate)
        self._dispatch()

    def jump_to_block(self, block_id: int) -> None:
        """Move to another block; speaking restarts from it only while playing.

        Raises:
            EngineNotReadyError: If the engine is not ready.
        """
        self._require_ready("jump")
        try:
            index: int = self._find_index(block_id)
        except BlockNotFoundError as err:
            logger.warning("Jump ignored: %s", err)
            return

        self.engine.stop()
        self._retire_in_flight()
        self._current_index = index
        if self._state is PlaybackState.PLAYING:
            self._dispatch()
        elif self._state is PlaybackState.PAUSED:
            # resume() continues from the jump target
            self._paused_index = index
        logger.debug("Jumped to block %d (index %d)", block_id, index)

    def pause(self) -> None:
        if self._state is not PlaybackState.PLAYING:
            logger.debug("Pause ignored in state '%s'", self._state)
            return
        self.engine.stop()
        interrupted: int | None = self._in_flight
        self._retire_in_flight()
        # the paused utterance may still report completion or failure
        self._interrupted = interrupted
        self._paused_index = self._current_index
        self._set_state(PlaybackState.PAUSED)

    def resume(self) -> None:
        """Speak again from the paused block.

        Raises:
            EngineNotReadyError: If the engine is not ready.
        """
        self._require_ready("resume")
        if self._state is not PlaybackState.PAUSED or self._paused_index is None:
            logger.debug("Resume ignored in state '%s'", self._state)
            return
        self._current_index = self._paused_index
        self._paused_index = None
        self._set_state(PlaybackState.PLAYING)
        self.engine.set_rate(self._speech_rate)
        self._dispatch()

    def stop(self) -> None:
        self.engine.stop()
        self._retire_in_flight()
        self._paused_index = None
        self._current_index = 0
        self._set_state(PlaybackState.IDLE)

    def set_speech_rate(self, rate: float) -> float:
        """Set the rate multiplier, clamped to [MIN_SPEECH_RATE, MAX_SPEECH_RATE].

        Returns:
            float: The rate actually applied.
        """
        clamped: float = max(MIN_SPEECH_RATE, min(MAX_SPEECH_RATE, float(rate)))
        if clamped != rate:
            logger.info("Speech rate %s clamped to %s", rate, clamped)
        self._speech_rate = clamped
        self.engine.set_rate(clamped)
        return clamped

    def set_voice(self, identifier: str) -> None:
        logger.info("Voice set to '%s'", identifier)
        self._current_voice = identifier
        self.engine.set_voice(identifier)

    def handle_notification(self, notification: SynthesisNotification) -> None:
        """Apply one engine notification. Runs on the event loop only."""
        if self._is_interrupted(notification):
            self._on_interrupted(notification)
            return

        applies_to_current: bool = notification.correlation_id == self._in_flight or (
            # an error whose utterance name was lost still belongs to the utterance in flight
            notification.kind is NotificationKind.ERROR
            and notification.correlation_id is None
        )
        if self._in_flight is None or not applies_to_current:
            logger.debug("Ignoring stale notification: %s (in flight: %s)", notification, self._in_flight)
            return

        match notification.kind:
            case NotificationKind.STARTED:
                self.emit_event("on_block_started", self._in_flight)
            case NotificationKind.DONE:
                self._on_done(self._in_flight)
            case NotificationKind.ERROR:
                self._on_error(notification)

    def post_notification(self, notification: SynthesisNotification) -> None:
        """Thread-safe entry point for engine notifications."""
        loop: asyncio.AbstractEventLoop | None = self._loop
        if loop is None:
            try:
                loop = asyncio.get_running_loop()
            except RuntimeError:
                logger.warning("Notification dropped, no event loop: %s", notification)
                return
        try:
            loop.call_soon_threadsafe(self._enqueue, notification)
        except RuntimeError as err:
            # the loop was closed under us during shutdown
            logger.warning("Notification dropped: %s (%s)", notification, err)

    async def notification_processor(self) -> None:
        """Consume engine notifications until close() shuts the queue down."""
        self._loop = asyncio.get_running_loop()
        try:
            while True:
                notification: SynthesisNotification = await self._notifications.get()
                self._notifications.task_done()
                self.handle_notification(notification)
        except asyncio.QueueShutDown:
            logger.debug("Notification queue closed")
        logger.info("Notification processor finished")

    def close(self) -> None:
        self._notifications.shutdown()

    def _enqueue(self, notification: SynthesisNotification) -> None:
        try:
            self._notifications.put_nowait(notification)
        except asyncio.QueueShutDown:
            logger.debug("Notification after close ignored: %s", notification)

    def _on_done(self, block_id: int) -> None:
        self._in_flight = None
        self.emit_event("on_block_completed", block_id)
        if self._state is not PlaybackState.PLAYING:
            # a pause or stop issued from the callback wins
            return

        self._current_index += 1
        if self._current_index <= self._end_index and self._current_index < len(self._blocks):
            self._dispatch()
        else:
            self._finish()

    def _is_interrupted(self, notification: SynthesisNotification) -> bool:
        if self._state is not PlaybackState.PAUSED or self._interrupted is None:
            return False
        if notification.kind is NotificationKind.ERROR:
            return notification.correlation_id in (self._interrupted, None)
        return notification.kind is NotificationKind.DONE and notification.correlation_id == self._interrupted

    def _on_interrupted(self, notification: SynthesisNotification) -> None:
        """Late result of the utterance that pause() cut off; the block is not advanced past."""
        block_id: int = self._interrupted
        self._interrupted = None
        if notification.kind is NotificationKind.DONE:
            logger.debug("Block %d completed while paused", block_id)
            self.emit_event("on_block_completed", block_id)
        else:
            self._on_error(notification)

    def _on_error(self, notification: SynthesisNotification) -> None:
        error: SynthesisFailureError = SynthesisFailureError.from_notification(notification)
        logger.error("Synthesis failed for block %s: %s", notification.correlation_id, error)
        self._in_flight = None
        self._paused_index = None
        self._set_state(PlaybackState.IDLE)
        self.emit_event("on_error", str(error))

    def _dispatch(self) -> None:
        if not 0 <= self._current_index < len(self._blocks):
            logger.debug("Index %d is past the last block", self._current_index)
            self._finish()
            return

        block: Block = self._blocks[self._current_index]
        text: str = self.preprocessor.preprocess(block.text)
        self._in_flight = block.id
        self._interrupted = None
        logger.info("Dispatching block %d (index %d)", block.id, self._current_index)
        logger.debug("Speakable text: '%s'", text)
        self.engine.speak(text, block.id)

    def _finish(self) -> None:
        self._in_flight = None
        self._set_state(PlaybackState.IDLE)
        logger.info("Playback completed")
        self.emit_event("on_playback_completed")

    def _retire_in_flight(self) -> None:
        if self._in_flight is not None:
            logger.debug("Retiring utterance %d", self._in_flight)
        self._in_flight = None
        self._interrupted = None

    def _set_state(self, state: PlaybackState) -> None:
        if state is not self._state:
            logger.info("Playback state: %s -> %s", self._state, state)
        self._state = state

    def _require_ready(self, action: str) -> None:
        if not self._ready:
            msg: str = f"Cannot {action}: TTS engine is not ready"
            raise EngineNotReadyError(msg)

    def _find_index(self, block_id: int) -> int:
        for index, block in enumerate(self._blocks):
            if block.id == block_id:
                return index
        msg = f"Block not found: {block_id}"
        raise BlockNotFoundError(msg)

    def _resolve_index(self, block_id: int, *, fallback: int, label: str) -> int:
        try:
            return self._find_index(block_id)
        except BlockNotFoundError as err:
            logger.warning("%s (%s id), falling back to index %d", err, label, fallback)
            return fallback

    def emit_event(self, name: str, *args: object) -> None:
        """Call a PlaybackCallbacks handler by name; handler exceptions are logged, not raised."""
        handler: Callable[..., None] = getattr(self.callbacks, name)
        try:
            handler(*args)
        except Exception:
            logger.exception("Playback callback '%s' raised", name)
