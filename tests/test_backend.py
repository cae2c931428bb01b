from unittest.mock import AsyncMock

import pytest

from winpick.adapters.hyprland import HyprlandBackend

from .testtools import FakeBackend

MONITORS = [
    {"id": 1, "name": "HDMI-A-1", "focused": False, "activeWorkspace": {"id": 5, "name": "5"}},
    {"id": 0, "name": "DP-1", "focused": True, "activeWorkspace": {"id": 1, "name": "1"}},
]


@pytest.mark.asyncio
async def test_active_window_none(mocker, test_logger):
    mocker.patch("winpick.adapters.hyprland.hyprctl_json", new_callable=AsyncMock, return_value={})
    assert await HyprlandBackend(test_logger).get_active_window() is None


@pytest.mark.asyncio
async def test_active_workspace(mocker, test_logger):
    query = mocker.patch("winpick.adapters.hyprland.hyprctl_json", new_callable=AsyncMock, return_value={"id": 3, "name": "3"})
    assert await HyprlandBackend(test_logger).get_active_workspace() == "3"
    query.assert_awaited_once_with("activeworkspace", logger=test_logger)


@pytest.mark.asyncio
async def test_close_window_is_weak(mocker, test_logger):
    dispatch = mocker.patch("winpick.adapters.hyprland.hyprctl", new_callable=AsyncMock, return_value=False)
    assert await HyprlandBackend(test_logger).close_window("0x1") is False
    dispatch.assert_awaited_once_with("closewindow address:0x1", logger=test_logger, weak=True)


@pytest.mark.asyncio
async def test_notify_info(mocker, test_logger):
    notify = mocker.patch("winpick.adapters.hyprland.notify", new_callable=AsyncMock)
    await HyprlandBackend(test_logger).notify_info("kill: 2 window(s) affected")
    assert notify.call_args.args[:3] == ("kill: 2 window(s) affected", 5000, "0000ff")


@pytest.mark.asyncio
async def test_send_to_other_monitor(backend):
    backend.monitors = MONITORS
    assert await backend.send_to_other_monitor("0xa3")
    assert backend.commands == ["movetoworkspacesilent 5,address:0xa3", "focuswindow address:0xa3"]


@pytest.mark.asyncio
async def test_send_to_other_monitor_single_monitor(backend):
    assert await backend.send_to_other_monitor("0xa3")
    assert backend.commands == ["focuswindow address:0xa3"]


@pytest.mark.asyncio
async def test_bring_missing_window(test_logger):
    backend = FakeBackend(test_logger)
    assert not await backend.bring_window("0xdead", "l")
    assert backend.commands == ["layoutmsg preselect l", "movetoworkspacesilent 1,address:0xdead"]
