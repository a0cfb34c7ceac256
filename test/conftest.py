import pytest

from trackgate.test.helper import reset_config


def pytest_make_parametrize_id(config, val, argname):
    """Keep byte payloads short in parametrized test identifiers."""
    if isinstance(val, bytes) and len(val) > 8:
        return f"{val[:8]!r}...({len(val)} bytes)"
    return repr(val)


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Never read the developer's own configuration."""
    monkeypatch.setenv("TRACKGATEDIR", str(tmp_path))
    reset_config()
    yield
    reset_config()
