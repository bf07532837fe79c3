"""
Pytest configuration and shared fixtures for extension host tests.
"""

import io
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))
# Make tests.mocks importable as a package
sys.path.insert(0, str(Path(__file__).parent.parent))

from exthost_core.bridge import RuntimeMessageRouter  # noqa: E402
from exthost_core.logging import HostLogger, LogConfig  # noqa: E402
from exthost_core.types import LogFormat, LogLevel  # noqa: E402

from tests.mocks import RecordingHost  # noqa: E402

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    """Return the fixtures directory."""
    return Path(__file__).parent / "fixtures"


# =============================================================================
# Component Fixtures
# =============================================================================


@pytest.fixture
def log_output() -> io.StringIO:
    """Buffer receiving HostLogger output."""
    return io.StringIO()


@pytest.fixture
def host_logger(log_output: io.StringIO) -> HostLogger:
    """JSON HostLogger writing every level to ``log_output``."""
    return HostLogger(LogConfig(level=LogLevel.DEBUG, format=LogFormat.JSON, output=log_output))


@pytest.fixture
def terminations() -> list[str]:
    """Records calls to the router's terminate callback."""
    return []


@pytest.fixture
def router(terminations: list[str]) -> RuntimeMessageRouter:
    """Router whose terminate callback appends to ``terminations``."""
    return RuntimeMessageRouter(on_terminate=lambda: terminations.append("exit"))


@pytest.fixture
def host() -> RecordingHost:
    """Empty recording host; tests add descriptors before starting a loader."""
    return RecordingHost()


# =============================================================================
# Markers
# =============================================================================


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "integration: Integration tests")
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "property: Property-based tests")
    config.addinivalue_line("markers", "security: Security tests")
