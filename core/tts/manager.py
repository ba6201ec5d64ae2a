from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from config.loader import AUTO_CONTEXT
from core.tts.engines import Pyttsx3Engine  # noqa: F401
from core.tts.interface import EngineNotReadyError, InitializationFailureError, Interface
from core.tts.playback_engine import PlaybackCallbacks, PlaybackEngine
from core.tts.voice_catalog import VoiceCatalogBuilder
from handlers.text_preprocessor import TextPreprocessor
from models.playback_models import DocumentContext, PlaybackState
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging
    from collections.abc import Iterable

    from models.config_models import Config
    from models.playback_models import Block
    from models.voice_models import VoiceCatalogEntry, VoiceDescriptor


__all__: list[str] = ["TTSManager"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)


class TTSManager:
    """TTSManager is responsible for reading a document aloud.

    It owns the synthesis engine, the text preprocessor and the playback engine, keeps the
    loaded document with its range selection, and runs the notification task that feeds
    engine progress into playback.
    """

    def __init__(
        self, config: Config, callbacks: PlaybackCallbacks | None = None, engine: Interface | None = None
    ) -> None:
        """Initialize the TTSManager with the given configuration.

        Args:
            config (Config): The configuration object containing speech and engine settings.
            callbacks (PlaybackCallbacks | None): Event handlers of the caller.
            engine (Interface | None): Engine instance to use instead of the one named by ENGINE.NAME.

        Raises:
            ValueError: If ENGINE.NAME is not a registered engine, or the engine settings are invalid.
        """
        logger.debug("Initializing TTSManager with config")
        self.config: Config = config
        self.callbacks: PlaybackCallbacks = callbacks or PlaybackCallbacks()
        logger.debug("Registered TTS classes: %s", Interface.get_registered())

        if engine is None:
            engine = Interface.get_engine(config.ENGINE.NAME)()
        engine.configure(config.ENGINE)
        self.engine: Interface = engine

        self.preprocessor: TextPreprocessor = TextPreprocessor()
        self.playback: PlaybackEngine = PlaybackEngine(self.engine, self.preprocessor, self.callbacks)

        self._blocks: list[Block] = []
        self._start_block_id: int | None = None
        self._end_block_id: int | None = None
        self._catalog: list[VoiceCatalogEntry] = []

        # Set to keep track of background tasks
        self.background_tasks: set[asyncio.Task[None]] = set()

    async def initialize(self) -> None:
        """Start the notification task and the synthesis engine.

        Success is reported through on_ready, failure through on_error. After a failure every
        playback request is rejected as not ready.
        """
        logger.info("TTSManager initialization started")

        if self.background_tasks:
            logger.warning("TTSManager is already initialized")
            return

        task: asyncio.Task[None] = asyncio.create_task(
            self.playback.notification_processor(), name="notification_processor_task"
        )
        logger.debug("Creating task: '%s'", task.get_name())
        self.background_tasks.add(task)

        try:
            voices: list[VoiceDescriptor] = await self.engine.initialize()
        except InitializationFailureError as err:
            logger.error("TTS engine '%s' failed to initialize: %s", self.engine.fetch_engine_name(), err)
            self._catalog = []
            self.playback.emit_event("on_error", str(err))
            return

        self._catalog = VoiceCatalogBuilder.build(voices)
        self.playback.mark_ready()
        self._apply_configured_voice()
        self.playback.set_speech_rate(self.config.SPEECH.RATE)
        logger.info("TTS engine '%s' ready", self.engine.fetch_engine_name())
        self.playback.emit_event("on_ready", list(self._catalog))

    async def close(self) -> None:
        """Stop playback, shut the engine down and terminate background tasks."""
        logger.info("Terminating background tasks")
        self.playback.stop()
        await self.engine.shutdown()

        # The shutdown() of the queue raises QueueShutDown in the consumer and ends its loop.
        self.playback.close()

        if self.background_tasks:
            logger.debug("Waiting for background tasks to finish")
            finished_tasks: set[asyncio.Task[None]]
            remaining_tasks: set[asyncio.Task[None]]
            finished_tasks, remaining_tasks = await asyncio.wait(self.background_tasks, timeout=2.0)

            for task in finished_tasks:
                if task.cancelled():
                    logger.debug("Task '%s' was cancelled", task.get_name())
                else:
                    logger.debug("Task '%s' completed successfully", task.get_name())
            if remaining_tasks:
                logger.warning("Some tasks are still pending: %s", [task.get_name() for task in remaining_tasks])
                for task in remaining_tasks:
                    task.cancel()

        self.background_tasks.clear()
        logger.info("TTSManager closed successfully")

    def load_document(self, blocks: Iterable[Block]) -> DocumentContext:
        """Replace the document, clear the range selection and select the document context.

        Args:
            blocks (Iterable[Block]): Blocks in reading order.

        Returns:
            DocumentContext: The context in effect for the new document.
        """
        if self.playback.state is not PlaybackState.IDLE:
            self.playback.stop()
        self._blocks = list(blocks)
        self.clear_selection()

        configured: str = self.config.SPEECH.CONTEXT
        if configured != AUTO_CONTEXT:
            self.preprocessor.set_context(DocumentContext(configured))
        else:
            detected: DocumentContext = self.preprocessor.detect_context(" ".join(block.text for block in self._blocks))
            logger.info("Detected document context: %s", detected.description)
        logger.info("Document loaded with %d block(s)", len(self._blocks))
        return self.preprocessor.context

    def set_document_context(self, context: DocumentContext) -> None:
        self.preprocessor.set_context(context)

    @property
    def document_context(self) -> DocumentContext:
        return self.preprocessor.context

    @property
    def context_description(self) -> str:
        return self.preprocessor.context_description

    def set_start_block(self, block_id: int) -> None:
        self._start_block_id = block_id

    def set_end_block(self, block_id: int) -> None:
        self._end_block_id = block_id

    def clear_selection(self) -> None:
        self._start_block_id = None
        self._end_block_id = None

    @property
    def selection(self) -> tuple[int | None, int | None]:
        """Selected (start, end) block ids; None means the document boundary."""
        return self._start_block_id, self._end_block_id

    def play(self) -> None:
        """Play the selected range, by default the whole document."""
        if not self._blocks:
            logger.debug("Play ignored, no document loaded")
            return
        start_id: int = self._start_block_id if self._start_block_id is not None else self._blocks[0].id
        self._start(start_id)

    def play_from_block(self, block_id: int) -> None:
        """Make block_id the range start and play from it."""
        if not self._blocks:
            logger.debug("Play ignored, no document loaded")
            return
        self._start_block_id = block_id
        self._start(block_id)

    def pause(self) -> None:
        self.playback.pause()

    def resume(self) -> None:
        try:
            self.playback.resume()
        except EngineNotReadyError as err:
            self._report_not_ready(err)

    def stop(self) -> None:
        self.playback.stop()

    def jump_to_block(self, block_id: int) -> None:
        try:
            self.playback.jump_to_block(block_id)
        except EngineNotReadyError as err:
            self._report_not_ready(err)

    def set_speech_rate(self, rate: float) -> float:
        return self.playback.set_speech_rate(rate)

    def set_voice(self, identifier: str) -> None:
        self.playback.set_voice(identifier)

    @property
    def playback_state(self) -> PlaybackState:
        return self.playback.state

    @property
    def speech_rate(self) -> float:
        return self.playback.speech_rate

    @property
    def current_voice(self) -> str | None:
        return self.playback.current_voice

    @property
    def catalog(self) -> list[VoiceCatalogEntry]:
        return list(self._catalog)

    def _start(self, start_id: int) -> None:
        try:
            self.playback.start_playback(self._blocks, start_id, self._end_block_id)
        except EngineNotReadyError as err:
            self._report_not_ready(err)

    def _report_not_ready(self, err: EngineNotReadyError) -> None:
        logger.warning("%s", err)
        self.playback.emit_event("on_error", str(err))

    def _apply_configured_voice(self) -> None:
        identifier: str = self.config.SPEECH.VOICE
        if not identifier:
            return
        if all(entry.identifier != identifier for entry in self._catalog):
            logger.warning("Configured voice '%s' is not installed; keeping the engine default", identifier)
            return
        self.playback.set_voice(identifier)
