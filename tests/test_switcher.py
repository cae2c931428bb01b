from unittest.mock import AsyncMock

import pytest

from winpick.models import SessionOutcome, SwitchOutcome
from winpick.selector import SelectorSession, Source
from winpick.switcher import ClassSwitcher
from winpick.window_source import WindowSource

from .conftest import make_client
from .testtools import FakeBackend


def make_switcher(backend, guard, log, outcome=SessionOutcome.CANCELLED):
    open_selector = AsyncMock(return_value=outcome)
    switcher = ClassSwitcher(WindowSource(backend), backend, guard, open_selector, log, split_direction="r")
    return switcher, open_selector


@pytest.mark.asyncio
async def test_focus_single_window_case_insensitive(test_logger, guard, mock_log):
    backend = FakeBackend(test_logger, [make_client("0x1", "Foo", "foo window", 1), make_client("0x2", "Bar", "bar", 0)], active="0x2")
    switcher, open_selector = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("foo") == SwitchOutcome.FOCUSED
    assert backend.commands == ["focuswindow address:0x1"]
    open_selector.assert_not_called()


@pytest.mark.asyncio
async def test_launch_class_name(test_logger, guard, mock_log):
    backend = FakeBackend(test_logger, [make_client("0x1", "Foo", "foo window", 0)], active="0x1")
    switcher, _ = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("Bar") == SwitchOutcome.LAUNCHED
    assert backend.commands == ["exec Bar"]


@pytest.mark.asyncio
async def test_launch_program(backend, guard, mock_log):
    switcher, _ = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("org.gnome.Nautilus", "nautilus --new-window") == SwitchOutcome.LAUNCHED
    assert backend.commands == ["exec nautilus --new-window"]


@pytest.mark.asyncio
async def test_launch_other_window(backend, guard, mock_log):
    switcher, _ = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("thunar", other_window=True) == SwitchOutcome.LAUNCHED
    assert backend.commands == ["layoutmsg preselect r", "exec thunar"]


@pytest.mark.asyncio
async def test_active_class_opens_selector(test_logger, guard, mock_log):
    clients = [make_client("0x1", "Foo", "one", 0), make_client("0x2", "Foo", "two", 1)]
    backend = FakeBackend(test_logger, clients, active="0x1")
    switcher, open_selector = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("Foo") == SwitchOutcome.SELECTOR
    open_selector.assert_awaited_once_with("Foo")
    assert backend.commands == []


@pytest.mark.asyncio
async def test_most_recent_window(backend, guard, mock_log):
    # 0xa2 (focused) is kitty: pick a class without the focus
    backend.clients.append(make_client("0xb1", "firefox", "Other tab", 1))
    switcher, _ = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("Firefox") == SwitchOutcome.FOCUSED
    assert backend.commands == ["focuswindow address:0xb1"]


@pytest.mark.asyncio
async def test_other_window_brings_it(backend, guard, mock_log):
    switcher, _ = make_switcher(backend, guard, mock_log)

    assert await switcher.switch_to_class("emacs", other_window=True) == SwitchOutcome.FOCUSED
    assert backend.commands == [
        "layoutmsg preselect r",
        "movetoworkspacesilent 1,address:0xa4",
        "focuswindow address:0xa4",
    ]


@pytest.mark.asyncio
async def test_no_op_during_session(backend, guard, mock_log):
    guard.acquire(SelectorSession.for_source(Source("x", AsyncMock(), {"a": AsyncMock()}, "a")))
    switcher, open_selector = make_switcher(backend, guard, mock_log)

    for class_name in ("kitty", "firefox", "nothing"):
        assert await switcher.switch_to_class(class_name) == SwitchOutcome.IGNORED
    assert backend.commands == []
    open_selector.assert_not_called()


@pytest.mark.asyncio
async def test_selector_rejected(backend, guard, mock_log):
    switcher, _ = make_switcher(backend, guard, mock_log, outcome=SessionOutcome.REJECTED)
    assert await switcher.switch_to_class("kitty") == SwitchOutcome.IGNORED



@pytest.mark.parametrize("class_name", ["emacs", "nothing"])
@pytest.mark.asyncio
async def test_session_started_while_listing(backend, guard, mock_log, class_name):
    switcher, open_selector = make_switcher(backend, guard, mock_log)
    session = SelectorSession.for_source(Source("windows", AsyncMock(), {"a": AsyncMock()}, "a"))
    get_clients = backend.get_clients

    async def racing_get_clients():
        clients = await get_clients()
        guard.acquire(session)
        return clients

    backend.get_clients = racing_get_clients

    assert await switcher.switch_to_class(class_name) == SwitchOutcome.IGNORED
    assert backend.commands == []
    assert guard.active is session
    open_selector.assert_not_called()
