"""Tests for the quiesce exception family."""

from quiesce.exceptions import (
    ApplicationError,
    HostCommandError,
    HostControlError,
    SnapshotError,
    UnsupportedPlatformError,
)


def test_application_error_stores_context():
    err = ApplicationError("boom", path="snap.json")

    assert str(err) == "boom"
    assert err.path == "snap.json"


def test_default_messages():
    assert str(SnapshotError()) == "Snapshot is missing, malformed, or already consumed"
    assert str(HostControlError()) == "Host control operation failed"


def test_host_command_error_renders_command():
    err = HostCommandError(["powershell.exe", "-Command", "Stop-Service"], returncode=5, stderr="Access denied\n")

    assert str(err) == "Command failed (5): powershell.exe -Command Stop-Service: Access denied"
    assert err.command == ["powershell.exe", "-Command", "Stop-Service"]
    assert err.returncode == 5
    assert isinstance(err, HostControlError)
    assert isinstance(err, ApplicationError)


def test_unsupported_platform_error():
    err = UnsupportedPlatformError("winreg")

    assert "only available on Windows" in str(err)
    assert err.facility == "winreg"
