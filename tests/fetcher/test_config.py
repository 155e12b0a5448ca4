from pathlib import Path

import pytest

from pokefetch.config import FetchConfig


def test_config_defaults_and_paths():
    config = FetchConfig(output_dir="data/out", log_file="logs/x.log", base_url="https://x.test/api/")

    assert config.output_dir == Path("data/out")
    assert config.log_file == Path("logs/x.log")
    assert config.base_url == "https://x.test/api"
    assert config.url_for("bulbasaur") == "https://x.test/api/bulbasaur"
    assert config.output_path("bulbasaur") == Path("data/out/bulbasaur.json")
    assert config.scratch_dir == Path("data/out/.partial")
    assert config.partial_path("bulbasaur", 4) == Path("data/out/.partial/bulbasaur.4.part")
    assert config.max_retries == 3
    assert config.request_timeout == 30.0
    assert config.preflight_timeout < config.request_timeout


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_retries": 0},
        {"max_workers": 0},
        {"retry_delay": -1},
        {"backoff_factor": 0.5},
        {"rate_limit_multiplier": 1.5},
        {"request_timeout": 0},
        {"preflight_timeout": -2},
        {"worker_deadline": 0},
        {"base_url": "ftp://pokeapi.co"},
    ],
)
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        FetchConfig(**kwargs)


def test_config_is_read_only():
    config = FetchConfig()
    with pytest.raises(AttributeError):
        config.max_retries = 10
