"""Extension factories addressed by import reference in tests."""

from typing import Any

from .mock_host import RecordingInstance


def build_echo(bridge: Any, exports: Any) -> dict[str, Any]:
    """Echo API: ``ping`` round-trips through the instance."""

    def ping(msg: str = "ping") -> Any:
        return bridge.send_sync_message(msg)

    return {"ping": ping, "tizen.Echo": type("Echo", (), {"kind": "echo"})}


def build_into_exports(bridge: Any, exports: Any) -> None:
    exports.version = "1.0"


def build_failing(bridge: Any, exports: Any) -> None:
    exports.partial = True
    raise RuntimeError("device not ready")


NOT_CALLABLE = 42


def make_instance(runtime_variables: Any) -> Any:
    """Instance factory; sync replies carry the current app id."""
    return RecordingInstance(sync_reply=runtime_variables.get("app_id"))
