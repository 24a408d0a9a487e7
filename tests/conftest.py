from __future__ import annotations

import pytest

from pipenet.core.build.config import SolverSettings
from pipenet.core.build.scenarios import residential_shower_network


@pytest.fixture
def network():
    return residential_shower_network()


@pytest.fixture
def settings():
    return SolverSettings(initial_guess_m_s=10.0, tol_pct=1.0, max_iters=200)
