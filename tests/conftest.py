import pytest

from interview_coach.config import Config
from interview_coach.interview import InterviewEventBus, InterviewSession
from interview_coach.interview.testing import (
    ManualScheduler, MockCoachProxy, MockMediaDevices, MockRecognitionEngine
)

QUESTIONS = (
    "Tell us about yourself?",
    "Why do you think you are good at sales?",
    "What is the biggest deal you have closed?",
)


@pytest.fixture
def questions():
    return QUESTIONS


@pytest.fixture
def event_bus():
    return InterviewEventBus()


@pytest.fixture
def recorded_events(event_bus):
    events = []
    event_bus.subscribe_all(events.append)
    return events


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def config(tmp_path):
    return Config(
        questions=QUESTIONS,
        profile_store_path=str(tmp_path / "local_storage.json"),
        log_file=str(tmp_path / "coach.log"),
    )


@pytest.fixture
def engines():
    """Every recognition engine created by a session, in creation order."""
    return []


@pytest.fixture
def session(config, scheduler, engines):
    def engine_factory():
        engine = MockRecognitionEngine()
        engines.append(engine)
        return engine

    s = InterviewSession(
        config,
        user_name="Dana",
        devices=MockMediaDevices(),
        engine_factory=engine_factory,
        coach=MockCoachProxy(),
        scheduler=scheduler,
    )
    yield s
    s.close()
