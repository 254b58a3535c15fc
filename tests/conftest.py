"""Shared test fixtures for viewbind."""

from pathlib import Path

import pytest

from viewbind.attach import ReloadSignal, RootStore, ScriptAttacher, SessionStore, TypeRegistry
from viewbind.scene.reader import read_tree
from viewbind.settings import BindingMode, GenerationSettings

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def settings():
    return GenerationSettings()


@pytest.fixture
def declarative_settings():
    return GenerationSettings(binding_mode=BindingMode.DECLARATIVE_REFERENCE)


@pytest.fixture
def login_panel():
    return read_tree(FIXTURES / "login_panel.yaml")


@pytest.fixture
def host():
    """In-memory host collaborators, keyed by role."""
    return {
        "registry": TypeRegistry(),
        "roots": RootStore(),
        "session": SessionStore(),
        "signal": ReloadSignal(),
    }


@pytest.fixture
def make_attacher(host):
    def _make(settings=None):
        return ScriptAttacher(
            host["registry"],
            host["roots"],
            session=host["session"],
            settings=settings or GenerationSettings(),
            signal=host["signal"],
        )
    return _make
