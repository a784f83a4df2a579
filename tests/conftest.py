import sys
from pathlib import Path

import pytest

# Ensure the `localfinder` package is importable when running pytest from the repository root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from localfinder.core import config, taxonomy  # noqa: E402

_CONFIG_ENV = (
    "NEARBY_API_BASE_URL",
    "GOOGLE_API_KEY",
    "RADIUS_PRESETS_KM",
    "DEFAULT_RADIUS_KM",
    "NEARBY_REQUEST_TIMEOUT",
    "TAXONOMY_PATH",
    "PORT",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in _CONFIG_ENV:
        monkeypatch.delenv(name, raising=False)
    config.get_settings.cache_clear()
    taxonomy.get_taxonomy.cache_clear()
    yield
    config.get_settings.cache_clear()
    taxonomy.get_taxonomy.cache_clear()
