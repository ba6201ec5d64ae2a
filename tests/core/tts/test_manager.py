from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

import pytest

from core.tts.interface import InitializationFailureError, Interface
from core.tts.manager import TTSManager
from core.tts.playback_engine import PlaybackCallbacks
from models.config_models import Config
from models.playback_models import Block, DocumentContext, PlaybackState
from models.voice_models import VoiceDescriptor

if TYPE_CHECKING:
    from collections.abc import Callable


DOCUMENT: list[Block] = [
    Block(10, "The Python function loads the dataset"),
    Block(20, "ML code runs on the GPU"),
    Block(30, "Done"),
]


class FakeEngine(Interface):
    def __init__(self, voices: list[VoiceDescriptor] | None = None, *, fail: bool = False) -> None:
        super().__init__()
        self.raw_voices: list[VoiceDescriptor] = voices or []
        self.fail: bool = fail
        self.spoken: list[tuple[str, int]] = []
        self.rates: list[float] = []
        self.voices: list[str] = []
        self.stop_calls: int = 0
        self.shutdown_calls: int = 0

    @staticmethod
    def fetch_engine_name() -> str:
        return "fake_manager"

    async def initialize(self) -> list[VoiceDescriptor]:
        if self.fail:
            msg = "Failed to initialize TTS engine: no audio device"
            raise InitializationFailureError(msg)
        return list(self.raw_voices)

    def speak(self, text: str, correlation_id: int) -> None:
        self.spoken.append((text, correlation_id))

    def set_voice(self, identifier: str) -> None:
        self.voices.append(identifier)

    def set_rate(self, rate: float) -> None:
        self.rates.append(rate)

    def stop(self) -> None:
        self.stop_calls += 1

    async def shutdown(self) -> None:
        self.shutdown_calls += 1


def _recording_callbacks(events: list[tuple[Any, ...]]) -> PlaybackCallbacks:
    return PlaybackCallbacks(
        on_ready=lambda catalog: events.append(("ready", [entry.identifier for entry in catalog])),
        on_block_started=lambda block_id: events.append(("started", block_id)),
        on_block_completed=lambda block_id: events.append(("completed", block_id)),
        on_playback_completed=lambda: events.append(("finished",)),
        on_error=lambda message: events.append(("error", message)),
    )


async def _wait_for(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
    async with asyncio.timeout(timeout):
        while not predicate():
            await asyncio.sleep(0.01)


def _voices() -> list[VoiceDescriptor]:
    return [
        VoiceDescriptor(identifier="v-de", name="de-de-anna", locale="de-DE"),
        VoiceDescriptor(identifier="v-en", name="en-us-x-female_1", locale="en-US"),
        VoiceDescriptor(identifier="v-cloud", name="cloud", locale="en-US", network_required=True),
    ]


@pytest.mark.asyncio
async def test_initialize_builds_catalog_and_reports_ready() -> None:
    events: list[tuple[Any, ...]] = []
    engine = FakeEngine(_voices())
    manager = TTSManager(Config(), _recording_callbacks(events), engine=engine)

    await manager.initialize()

    assert events == [("ready", ["v-en", "v-de"])]
    assert [entry.display_name for entry in manager.catalog] == ["Female Voice 1", "Anna Voice"]
    assert manager.playback.is_ready
    assert engine.rates == [1.0]
    assert {task.get_name() for task in manager.background_tasks} == {"notification_processor_task"}

    await manager.close()


@pytest.mark.asyncio
async def test_initialize_twice_is_ignored() -> None:
    manager = TTSManager(Config(), engine=FakeEngine())

    await manager.initialize()
    await manager.initialize()

    assert len(manager.background_tasks) == 1
    await manager.close()


@pytest.mark.asyncio
async def test_initialize_failure_reports_error_and_rejects_playback() -> None:
    events: list[tuple[Any, ...]] = []
    engine = FakeEngine(_voices(), fail=True)
    manager = TTSManager(Config(), _recording_callbacks(events), engine=engine)

    await manager.initialize()
    manager.load_document(DOCUMENT)
    manager.play()

    assert events == [
        ("error", "Failed to initialize TTS engine: no audio device"),
        ("error", "Cannot start playback: TTS engine is not ready"),
    ]
    assert manager.catalog == []
    assert manager.playback_state is PlaybackState.IDLE
    assert engine.spoken == []
    await manager.close()


@pytest.mark.asyncio
async def test_configured_voice_and_rate_are_applied() -> None:
    config = Config()
    config.SPEECH.VOICE = "v-de"
    config.SPEECH.RATE = 1.5
    engine = FakeEngine(_voices())
    manager = TTSManager(config, engine=engine)

    await manager.initialize()

    assert engine.voices == ["v-de"]
    assert manager.current_voice == "v-de"
    assert manager.speech_rate == 1.5
    await manager.close()


@pytest.mark.asyncio
async def test_configured_voice_not_installed_is_skipped() -> None:
    config = Config()
    config.SPEECH.VOICE = "v-cloud"
    engine = FakeEngine(_voices())
    manager = TTSManager(config, engine=engine)

    await manager.initialize()

    assert engine.voices == []
    assert manager.current_voice is None
    await manager.close()


def test_load_document_detects_context() -> None:
    manager = TTSManager(Config(), engine=FakeEngine())

    context: DocumentContext = manager.load_document(DOCUMENT)

    assert context is DocumentContext.TECHNICAL
    assert manager.document_context is DocumentContext.TECHNICAL
    assert manager.context_description == "Technical/Programming"


def test_load_document_uses_configured_context() -> None:
    config = Config()
    config.SPEECH.CONTEXT = "medical"
    manager = TTSManager(config, engine=FakeEngine())

    assert manager.load_document(DOCUMENT) is DocumentContext.MEDICAL


def test_load_document_clears_selection() -> None:
    manager = TTSManager(Config(), engine=FakeEngine())
    manager.set_start_block(20)
    manager.set_end_block(30)

    manager.load_document(DOCUMENT)

    assert manager.selection == (None, None)


def test_set_document_context_overrides_detection() -> None:
    manager = TTSManager(Config(), engine=FakeEngine())
    manager.load_document(DOCUMENT)

    manager.set_document_context(DocumentContext.GENERAL)

    assert manager.context_description == "General"


@pytest.mark.asyncio
async def test_play_without_document_is_ignored() -> None:
    events: list[tuple[Any, ...]] = []
    engine = FakeEngine()
    manager = TTSManager(Config(), _recording_callbacks(events), engine=engine)
    await manager.initialize()

    manager.play()
    manager.play_from_block(10)

    assert engine.spoken == []
    assert events == [("ready", [])]
    await manager.close()


@pytest.mark.asyncio
async def test_play_whole_document_until_completion() -> None:
    events: list[tuple[Any, ...]] = []
    engine = FakeEngine()
    manager = TTSManager(Config(), _recording_callbacks(events), engine=engine)
    await manager.initialize()
    manager.load_document(DOCUMENT)

    manager.play()
    for block in DOCUMENT:
        await _wait_for(lambda block_id=block.id: engine.spoken[-1][1] == block_id)
        engine.notify_started(block.id)
        engine.notify_done(block.id)

    await _wait_for(lambda: ("finished",) in events)
    assert [block_id for _, block_id in engine.spoken] == [10, 20, 30]
    assert engine.spoken[1] == ("machine learning code runs on the G P U", 20)
    assert events[1:] == [
        ("started", 10),
        ("completed", 10),
        ("started", 20),
        ("completed", 20),
        ("started", 30),
        ("completed", 30),
        ("finished",),
    ]
    assert manager.playback_state is PlaybackState.IDLE
    await manager.close()


@pytest.mark.asyncio
async def test_play_selected_range() -> None:
    events: list[tuple[Any, ...]] = []
    engine = FakeEngine()
    manager = TTSManager(Config(), _recording_callbacks(events), engine=engine)
    await manager.initialize()
    manager.load_document(DOCUMENT)
    manager.set_start_block(20)
    manager.set_end_block(20)

    manager.play()
    engine.notify_done(20)

    await _wait_for(lambda: ("finished",) in events)
    assert [block_id for _, block_id in engine.spoken] == [20]
    await manager.close()


@pytest.mark.asyncio
async def test_play_from_block_sets_range_start() -> None:
    engine = FakeEngine()
    manager = TTSManager(Config(), engine=engine)
    await manager.initialize()
    manager.load_document(DOCUMENT)

    manager.play_from_block(30)

    assert manager.selection == (30, None)
    assert engine.spoken == [("Done", 30)]
    await manager.close()


@pytest.mark.asyncio
async def test_forwarders_drive_playback() -> None:
    engine = FakeEngine()
    manager = TTSManager(Config(), engine=engine)
    await manager.initialize()
    manager.load_document(DOCUMENT)
    manager.play()

    manager.pause()
    assert manager.playback_state is PlaybackState.PAUSED

    manager.jump_to_block(30)
    manager.resume()
    assert manager.playback_state is PlaybackState.PLAYING
    assert engine.spoken[-1] == ("Done", 30)

    assert manager.set_speech_rate(9.0) == 3.0
    manager.set_voice("v-en")
    assert manager.current_voice == "v-en"

    manager.stop()
    assert manager.playback_state is PlaybackState.IDLE
    await manager.close()


@pytest.mark.asyncio
async def test_resume_and_jump_before_ready_report_errors() -> None:
    events: list[tuple[Any, ...]] = []
    manager = TTSManager(Config(), _recording_callbacks(events), engine=FakeEngine())

    manager.resume()
    manager.jump_to_block(10)

    assert [kind for kind, *_ in events] == ["error", "error"]


@pytest.mark.asyncio
async def test_close_shuts_down_engine_and_tasks() -> None:
    engine = FakeEngine()
    manager = TTSManager(Config(), engine=engine)
    await manager.initialize()
    tasks: list[asyncio.Task[None]] = list(manager.background_tasks)

    await manager.close()

    assert engine.shutdown_calls == 1
    assert manager.background_tasks == set()
    assert all(task.done() for task in tasks)


def test_unknown_engine_name_raises() -> None:
    config = Config()
    config.ENGINE.NAME = "does-not-exist"

    with pytest.raises(ValueError, match="No such engine registered"):
        TTSManager(config)
