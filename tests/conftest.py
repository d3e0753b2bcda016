"""
Pytest fixtures for testing
"""
import datetime
import sys
from pathlib import Path

import pytest

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from services.scraper.core.models import WasteData  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_html_path():
    """Path to a saved karlsruhe.de calendar page"""
    return FIXTURES_DIR / "response.html"


@pytest.fixture
def sample_html(sample_html_path):
    return sample_html_path.read_text(encoding="utf-8")


@pytest.fixture
def sample_waste_data():
    """Waste data contained in the sample page"""
    return WasteData(
        residual=[
            datetime.date(2023, 6, 16),
            datetime.date(2023, 6, 29),
            datetime.date(2023, 7, 14),
        ],
        organic=[
            datetime.date(2023, 6, 7),
            datetime.date(2023, 6, 14),
            datetime.date(2023, 6, 21),
        ],
        recyclable=[
            datetime.date(2023, 6, 7),
            datetime.date(2023, 6, 22),
            datetime.date(2023, 7, 6),
        ],
        paper=[
            datetime.date(2023, 6, 14),
            datetime.date(2023, 7, 12),
            datetime.date(2023, 8, 9),
        ],
        bulky=datetime.date(2023, 7, 12),
    )


@pytest.fixture
def sample_events(sample_waste_data):
    return sample_waste_data.to_events()


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "real_api: marks tests that call the live karlsruhe.de service")


def pytest_addoption(parser):
    """Add custom pytest options"""
    parser.addoption(
        "--use-network",
        action="store_true",
        default=False,
        help="Run tests that call the live karlsruhe.de service",
    )


def pytest_collection_modifyitems(config, items):
    if config.getoption("--use-network"):
        return
    skip_network = pytest.mark.skip(reason="needs --use-network")
    for item in items:
        if "real_api" in item.keywords:
            item.add_marker(skip_network)
