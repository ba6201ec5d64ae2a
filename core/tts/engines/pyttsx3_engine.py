from __future__ import annotations

import asyncio
import concurrent.futures
import queue
import threading
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Final

import pyttsx3

from core.tts.interface import InitializationFailureError, Interface
from models.voice_models import VoiceDescriptor
from utils.logger_utils import LoggerUtils

if TYPE_CHECKING:
    import logging


__all__: list[str] = ["Pyttsx3Engine"]

logger: logging.Logger = LoggerUtils.get_logger(__name__)

# pyttsx3 error callbacks carry an exception, not a numeric code
GENERIC_ERROR_CODE: Final[int] = -1
# Words per minute when the driver does not report a usable default
FALLBACK_BASE_RATE: Final[int] = 200
SHUTDOWN_TIMEOUT: Final[float] = 3.0


class _CommandKind(StrEnum):
    SPEAK = "speak"
    VOICE = "voice"
    RATE = "rate"
    SHUTDOWN = "shutdown"


@dataclass(frozen=True)
class _Command:
    kind: _CommandKind
    text: str = ""
    correlation_id: int = 0
    value: Any = None


class Pyttsx3Engine(Interface):
    """Offline synthesis through pyttsx3 (SAPI5, NSSpeechSynthesizer or espeak).

    pyttsx3 drivers must be used from the thread that created them, so a dedicated worker
    thread owns the pyttsx3 engine and executes commands from a thread-safe queue. Progress
    callbacks fire on that worker thread and are forwarded unchanged to the bound sink.

    Flush semantics: speak() drops queued utterances that have not started yet and
    interrupts the one being spoken. pyttsx3 reports an interrupted utterance as finished
    with completed=False; such reports are not forwarded as DONE.
    """

    def __init__(self) -> None:
        logger.debug("%s initializing", self.__class__.__name__)
        super().__init__()
        self._commands: queue.Queue[_Command] = queue.Queue()
        self._worker: threading.Thread | None = None
        self._engine: pyttsx3.Engine | None = None
        self._speaking: threading.Event = threading.Event()

    @staticmethod
    def fetch_engine_name() -> str:
        return "pyttsx3"

    async def initialize(self) -> list[VoiceDescriptor]:
        if self._worker is not None:
            msg = "pyttsx3 engine is already initialized"
            raise InitializationFailureError(msg)

        ready: concurrent.futures.Future[list[VoiceDescriptor]] = concurrent.futures.Future()
        self._worker = threading.Thread(target=self._worker_main, args=(ready,), name="pyttsx3_worker", daemon=True)
        self._worker.start()
        try:
            return await asyncio.wrap_future(ready)
        except InitializationFailureError:
            self._worker = None
            raise

    def speak(self, text: str, correlation_id: int) -> None:
        self._discard_pending()
        self._interrupt()
        self._commands.put(_Command(_CommandKind.SPEAK, text=text, correlation_id=correlation_id))

    def set_voice(self, identifier: str) -> None:
        self._commands.put(_Command(_CommandKind.VOICE, value=identifier))

    def set_rate(self, rate: float) -> None:
        self._commands.put(_Command(_CommandKind.RATE, value=rate))

    def stop(self) -> None:
        self._discard_pending()
        self._interrupt()

    async def shutdown(self) -> None:
        if self._worker is None:
            return
        self.stop()
        self._commands.put(_Command(_CommandKind.SHUTDOWN))
        await asyncio.to_thread(self._worker.join, SHUTDOWN_TIMEOUT)
        if self._worker.is_alive():
            logger.warning("pyttsx3 worker did not exit within %.1f seconds", SHUTDOWN_TIMEOUT)
        self._worker = None
        self._engine = None
        await super().shutdown()

    def _discard_pending(self) -> None:
        """Drop queued utterances; settings and shutdown commands are kept in order."""
        kept: list[_Command] = []
        while True:
            try:
                command: _Command = self._commands.get_nowait()
            except queue.Empty:
                break
            if command.kind is _CommandKind.SPEAK:
                logger.debug("Discarding pending utterance %d", command.correlation_id)
            else:
                kept.append(command)
        for command in kept:
            self._commands.put(command)

    def _interrupt(self) -> None:
        if self._engine is not None and self._speaking.is_set():
            # Cross-thread stop is how pyttsx3 interrupts runAndWait()
            self._engine.stop()

    def _worker_main(self, ready: concurrent.futures.Future[list[VoiceDescriptor]]) -> None:
        try:
            engine: pyttsx3.Engine = pyttsx3.init()
            engine.connect("started-utterance", self._on_started)
            engine.connect("finished-utterance", self._on_finished)
            engine.connect("error", self._on_error)
            driver_rate: int = int(engine.getProperty("rate") or FALLBACK_BASE_RATE)
            voices: list[VoiceDescriptor] = [self._describe(voice) for voice in engine.getProperty("voices") or []]
        except (ImportError, OSError, RuntimeError, KeyError, TypeError, ValueError) as err:
            logger.error("Failed to initialize pyttsx3: %s", err)
            ready.set_exception(InitializationFailureError(f"Failed to initialize TTS engine: {err}"))
            return

        if self._base_rate <= 0:
            self._base_rate = driver_rate
        self._engine = engine
        logger.info("pyttsx3 initialized with %d voice(s), base rate %d wpm", len(voices), self._base_rate)
        ready.set_result(voices)

        while True:
            command: _Command = self._commands.get()
            if command.kind is _CommandKind.SHUTDOWN:
                break
            try:
                self._execute(engine, command)
            except (OSError, RuntimeError, TypeError, ValueError) as err:
                logger.error("pyttsx3 command '%s' failed: %s", command.kind, err)
                if command.kind is _CommandKind.SPEAK:
                    self.notify_error(command.correlation_id, GENERIC_ERROR_CODE, str(err))

        logger.debug("pyttsx3 worker exiting")

    def _execute(self, engine: pyttsx3.Engine, command: _Command) -> None:
        match command.kind:
            case _CommandKind.SPEAK:
                logger.debug("Speaking utterance %d", command.correlation_id)
                engine.say(command.text, str(command.correlation_id))
                self._speaking.set()
                try:
                    engine.runAndWait()
                finally:
                    self._speaking.clear()
            case _CommandKind.VOICE:
                engine.setProperty("voice", command.value)
            case _CommandKind.RATE:
                engine.setProperty("rate", round(self._base_rate * float(command.value)))
            case _:
                logger.warning("Unknown command: %s", command.kind)

    def _on_started(self, name: str | None) -> None:
        self.notify_started(name)

    def _on_finished(self, name: str | None, completed: bool) -> None:  # noqa: FBT001
        if not completed:
            logger.debug("Utterance %s interrupted", name)
            return
        self.notify_done(name)

    def _on_error(self, name: str | None, exception: BaseException) -> None:
        self.notify_error(name, GENERIC_ERROR_CODE, str(exception))

    @staticmethod
    def _describe(voice: Any) -> VoiceDescriptor:
        """Convert a pyttsx3 Voice; pyttsx3 only exposes locally installed voices."""
        languages: list[Any] = list(getattr(voice, "languages", None) or [])
        locale: str = ""
        if languages:
            first: Any = languages[0]
            locale = first.decode("utf-8", errors="ignore") if isinstance(first, bytes) else str(first)
            # espeak prefixes a priority byte
            locale = locale.lstrip("\x00\x01\x02\x03\x04\x05\x06\x07\x08\x09\x0a\x0b\x0c\x0d\x0e\x0f").strip()
        return VoiceDescriptor(
            identifier=str(voice.id),
            name=str(getattr(voice, "name", None) or voice.id),
            locale=locale,
        )
