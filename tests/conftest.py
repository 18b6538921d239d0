# tests/conftest.py
"""Shared test fixtures and Hypothesis configuration.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/property/
"""

import logging
import os
from collections.abc import Iterator

import pytest
import structlog
from hypothesis import Phase, Verbosity, settings

from frontload.engine.registry import DEFAULT_REGISTRY, QueueRegistry


@pytest.fixture
def registry() -> QueueRegistry:
    """A fresh registry per test; never share one between renders."""
    return QueueRegistry()


@pytest.fixture(autouse=True)
def _clean_default_registry() -> Iterator[None]:
    """Tests that fall back to DEFAULT_REGISTRY must not leak slots."""
    DEFAULT_REGISTRY.reset_all()
    yield
    DEFAULT_REGISTRY.reset_all()


@pytest.fixture(autouse=True)
def _runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Pin environment detection so a developer's shell can't change results."""
    monkeypatch.delenv("FRONTLOAD_RUNTIME", raising=False)
    monkeypatch.delenv("FRONTLOAD_ENV", raising=False)


@pytest.fixture(autouse=True)
def _restore_logging() -> Iterator[None]:
    """configure_logging() (also run by the CLI callback) replaces root handlers."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    quiet_levels = {name: logging.getLogger(name).level for name in ("asyncio", "dynaconf")}
    yield
    root.handlers = handlers
    root.setLevel(level)
    for name, quiet_level in quiet_levels.items():
        logging.getLogger(name).setLevel(quiet_level)
    structlog.reset_defaults()


# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))
