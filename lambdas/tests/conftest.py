"""Shared pytest fixtures."""

import os

import pytest

os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "rollbot")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "Rollbot")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")


class ScriptedRandom:
    """Random source that replays a fixed list of die faces."""

    def __init__(self, faces: list[int]) -> None:
        self.faces = list(faces)
        self.calls: list[tuple[int, int]] = []

    def randint(self, a: int, b: int) -> int:
        self.calls.append((a, b))
        face = self.faces.pop(0)
        assert a <= face <= b, f"scripted face {face} outside [{a}, {b}]"
        return face


@pytest.fixture
def scripted_rng():
    """Factory for random sources with predetermined faces."""
    return ScriptedRandom


@pytest.fixture
def env_setup(monkeypatch):
    """Set roll bot environment variables and clear cached config."""
    from shared.config import get_config

    monkeypatch.setenv("COMMAND_PREFIX", "!")
    monkeypatch.setenv("HELP_TRIGGER", "help")
    monkeypatch.setenv("ENVIRONMENT", "test")
    monkeypatch.setenv("POWERTOOLS_LOG_LEVEL", "DEBUG")
    if hasattr(get_config, "_config"):
        delattr(get_config, "_config")
    yield
    if hasattr(get_config, "_config"):
        delattr(get_config, "_config")
