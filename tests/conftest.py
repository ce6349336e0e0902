import numpy as np
import pytest

from nnloss import config


@pytest.fixture(autouse=True)
def default_config(monkeypatch, tmp_path):
    # keep any nnloss.yaml in the working directory out of the tests
    monkeypatch.setenv(config.ENV_VAR, str(tmp_path / "no-such-config.yaml"))
    config.load_config()
    yield config.CONFIG
    config.load_config()


@pytest.fixture
def rng():
    return np.random.default_rng(0)
