import logging

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from orbitalcloud.config import SamplerSettings


@pytest.fixture
def fast_settings() -> SamplerSettings:
    """Small budgets and a coarse ceiling grid for quick rejection runs."""
    return SamplerSettings(min_stage_draws=1_000, batch_size=4_096, ceiling_grid_resolution=9)


@pytest.fixture(autouse=True)
def no_show(monkeypatch):
    monkeypatch.setattr(plt, "show", lambda *args, **kwargs: None)
    yield
    plt.close("all")


@pytest.fixture(autouse=True)
def reset_package_logger():
    """setup_logging() attaches handlers to captured streams; drop them after each test."""
    yield
    logger = logging.getLogger("orbitalcloud")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
