"""Unit tests for core.tts.engines.pyttsx3_engine module."""

from __future__ import annotations

import asyncio
from types import SimpleNamespace
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import pytest

from core.tts.engines.pyttsx3_engine import GENERIC_ERROR_CODE, Pyttsx3Engine
from core.tts.interface import InitializationFailureError
from models.config_models import Engine
from models.playback_models import NotificationKind, SynthesisNotification
from models.voice_models import VoiceDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable


class FakeDriver:
    """Stands in for pyttsx3.Engine; runAndWait() reports every queued utterance."""

    def __init__(self, voices: list[Any] | None = None, rate: int = 200, *, completed: bool = True) -> None:
        self.callbacks: dict[str, Callable[..., None]] = {}
        self.properties: dict[str, Any] = {"rate": rate, "voices": voices or []}
        self.queued: list[tuple[str, str | None]] = []
        self.spoken: list[tuple[str, str | None]] = []
        self.set_calls: list[tuple[str, Any]] = []
        self.completed: bool = completed
        self.fail_with: Exception | None = None

    def connect(self, topic: str, callback: Callable[..., None]) -> None:
        self.callbacks[topic] = callback

    def getProperty(self, name: str) -> Any:  # noqa: N802
        return self.properties[name]

    def setProperty(self, name: str, value: Any) -> None:  # noqa: N802
        self.set_calls.append((name, value))

    def say(self, text: str, name: str | None = None) -> None:
        self.queued.append((text, name))

    def runAndWait(self) -> None:  # noqa: N802
        for text, name in self.queued:
            self.spoken.append((text, name))
            self.callbacks["started-utterance"](name)
            if self.fail_with is not None:
                self.callbacks["error"](name, self.fail_with)
                continue
            self.callbacks["finished-utterance"](name, self.completed)
        self.queued.clear()

    def stop(self) -> None:
        pass


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


def _voices() -> list[Any]:
    return [
        SimpleNamespace(id="voice.alice", name="Alice", languages=[b"\x05en-us"]),
        SimpleNamespace(id="voice.bruno", name=None, languages=["de_DE"]),
        SimpleNamespace(id="voice.plain", name="Plain", languages=[]),
    ]


@pytest.mark.asyncio
async def test_initialize_returns_voice_descriptors() -> None:
    driver = FakeDriver(_voices())
    engine = Pyttsx3Engine()

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        voices: list[VoiceDescriptor] = await engine.initialize()

    assert voices == [
        VoiceDescriptor(identifier="voice.alice", name="Alice", locale="en-us"),
        VoiceDescriptor(identifier="voice.bruno", name="voice.bruno", locale="de_DE"),
        VoiceDescriptor(identifier="voice.plain", name="Plain", locale=""),
    ]
    assert all(voice.is_local for voice in voices)
    assert set(driver.callbacks) == {"started-utterance", "finished-utterance", "error"}
    await engine.shutdown()


@pytest.mark.asyncio
async def test_initialize_failure_raises() -> None:
    engine = Pyttsx3Engine()

    with (
        patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", side_effect=RuntimeError("no driver")),
        pytest.raises(InitializationFailureError, match="no driver"),
    ):
        await engine.initialize()


@pytest.mark.asyncio
async def test_speak_reports_start_and_done() -> None:
    driver = FakeDriver()
    engine = Pyttsx3Engine()
    received: list[SynthesisNotification] = []
    engine.bind(received.append)

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        engine.speak("hello world", 7)
        await _wait_for(lambda: len(received) == 2)
        await engine.shutdown()

    assert driver.spoken == [("hello world", "7")]
    assert received == [
        SynthesisNotification(NotificationKind.STARTED, 7),
        SynthesisNotification(NotificationKind.DONE, 7),
    ]


@pytest.mark.asyncio
async def test_interrupted_utterance_emits_no_done() -> None:
    driver = FakeDriver(completed=False)
    engine = Pyttsx3Engine()
    received: list[SynthesisNotification] = []
    engine.bind(received.append)

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        engine.speak("cut short", 3)
        await _wait_for(lambda: len(driver.spoken) == 1)
        await engine.shutdown()

    assert received == [SynthesisNotification(NotificationKind.STARTED, 3)]


@pytest.mark.asyncio
async def test_driver_error_is_reported() -> None:
    driver = FakeDriver()
    driver.fail_with = OSError("audio device busy")
    engine = Pyttsx3Engine()
    received: list[SynthesisNotification] = []
    engine.bind(received.append)

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        engine.speak("text", 4)
        await _wait_for(lambda: len(received) == 2)
        await engine.shutdown()

    assert received[1] == SynthesisNotification(
        NotificationKind.ERROR, 4, code=GENERIC_ERROR_CODE, message="audio device busy"
    )


@pytest.mark.asyncio
async def test_rate_uses_driver_default_as_base() -> None:
    driver = FakeDriver(rate=180)
    engine = Pyttsx3Engine()

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        engine.set_rate(1.5)
        engine.set_voice("voice.alice")
        await _wait_for(lambda: len(driver.set_calls) == 2)
        await engine.shutdown()

    assert driver.set_calls == [("rate", 270), ("voice", "voice.alice")]


@pytest.mark.asyncio
async def test_rate_uses_configured_base_rate() -> None:
    driver = FakeDriver(rate=180)
    engine = Pyttsx3Engine()
    engine.configure(Engine(BASE_RATE=100))

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        engine.set_rate(0.5)
        await _wait_for(lambda: len(driver.set_calls) == 1)
        await engine.shutdown()

    assert driver.set_calls == [("rate", 50)]


@pytest.mark.asyncio
async def test_initialize_twice_raises() -> None:
    driver = FakeDriver()
    engine = Pyttsx3Engine()

    with patch("core.tts.engines.pyttsx3_engine.pyttsx3.init", return_value=driver):
        await engine.initialize()
        with pytest.raises(InitializationFailureError):
            await engine.initialize()
        await engine.shutdown()


@pytest.mark.asyncio
async def test_shutdown_without_initialize_is_harmless() -> None:
    engine = Pyttsx3Engine()

    await engine.shutdown()


def test_fetch_engine_name() -> None:
    assert Pyttsx3Engine.fetch_engine_name() == "pyttsx3"
