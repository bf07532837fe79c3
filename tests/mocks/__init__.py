"""Test mocks for exthost-core.

Provides mock implementations for testing:
- RecordingHost: HostRuntime serving fixed descriptors
- RecordingInstance: Extension instance recording primitive calls
"""

from .mock_host import RecordingHost, RecordingInstance

__all__ = ["RecordingHost", "RecordingInstance"]
