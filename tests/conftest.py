"""Shared fixtures and fakes for askprofiles tests."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import List, Optional, Tuple

import pytest

from askprofiles.config import load_settings, tool_settings_from, ToolSettings
from askprofiles.profile_manager import ListingOutput, ProfileCache, ProfileManager


class FakeLister:
    """Returns queued ListingOutput values and counts invocations."""

    def __init__(self, *outputs: ListingOutput) -> None:
        self.outputs: List[ListingOutput] = list(outputs)
        self.calls = 0

    def push(self, stdout: str = "", stderr: str = "", returncode: int = 0) -> None:
        self.outputs.append(ListingOutput(stdout, stderr, returncode))

    def list_profiles(self) -> ListingOutput:
        self.calls += 1
        if len(self.outputs) > 1:
            return self.outputs.pop(0)
        return self.outputs[0]


class FakeNotifier:
    def __init__(self, answer: Optional[str] = None, error: Optional[Exception] = None) -> None:
        self.answer = answer
        self.error = error
        self.shown: List[Tuple[str, str]] = []

    def show_error_choice(self, message: str, action_label: str) -> Optional[str]:
        self.shown.append((message, action_label))
        if self.error is not None:
            raise self.error
        return self.answer


class RecordingRunner:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.commands: List[str] = []

    def run(self, command_name: str) -> None:
        self.commands.append(command_name)
        if self.error is not None:
            raise self.error


class RecordingOpener:
    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.urls: List[str] = []

    def open(self, url: str) -> None:
        self.urls.append(url)
        if self.error is not None:
            raise self.error


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path, monkeypatch):
    """Keep settings.ini and the log file inside the test's tmp dir."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(tmp_path / "state"))
    yield tmp_path
    # setup_logging() turns propagation off; undo it so caplog keeps working
    logger = logging.getLogger("askprofiles")
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def tool_settings() -> ToolSettings:
    return tool_settings_from(load_settings())


@pytest.fixture
def lister() -> FakeLister:
    return FakeLister()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def opener() -> RecordingOpener:
    return RecordingOpener()


@pytest.fixture
def make_manager(lister, notifier, runner, opener, tool_settings):
    def _make(**overrides) -> ProfileManager:
        settings = replace(tool_settings, **overrides)
        return ProfileManager(
            cache=ProfileCache(),
            lister=lister,
            settings=settings,
            notifier=notifier,
            command_runner=runner,
            link_opener=opener,
        )

    return _make
