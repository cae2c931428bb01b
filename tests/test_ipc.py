from unittest.mock import AsyncMock, Mock

import pytest

from winpick import ipc
from winpick.models import WinpickError


@pytest.fixture
def mock_open_connection(mocker):
    reader = AsyncMock()
    # StreamWriter methods write and close are synchronous, drain and wait_closed are async
    writer = Mock()
    writer.drain = AsyncMock()
    writer.wait_closed = AsyncMock()

    mock_connect = mocker.patch("asyncio.open_unix_connection", return_value=(reader, writer))
    return mock_connect, reader, writer


@pytest.mark.asyncio
async def test_hyprctl_connection_context_manager(mock_open_connection):
    mock_connect, reader, writer = mock_open_connection

    async with ipc.hyprctl_connection(Mock()) as (r, w):
        assert r == reader
        assert w == writer

    mock_connect.assert_called_once_with(ipc.HYPRCTL)
    writer.close.assert_called_once()
    writer.wait_closed.assert_awaited_once()


@pytest.mark.asyncio
async def test_hyprctl_connection_error(mocker):
    mocker.patch("asyncio.open_unix_connection", side_effect=FileNotFoundError)
    logger = Mock()

    with pytest.raises(WinpickError):
        async with ipc.hyprctl_connection(logger):
            pass

    logger.critical.assert_called_with("hyprctl socket not found! is it running ?")


@pytest.mark.asyncio
async def test_hyprctl_json(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.return_value = b'[{"address": "0x1", "class": "kitty"}]'

    result = await ipc.hyprctl_json("clients", logger=Mock())

    assert result == [{"address": "0x1", "class": "kitty"}]
    writer.write.assert_called_with(b"-j/clients")
    writer.drain.assert_awaited_once()


@pytest.mark.asyncio
async def test_hyprctl_success(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.return_value = b"ok\n"

    assert await ipc.hyprctl("focuswindow address:0x1", logger=Mock()) is True
    writer.write.assert_called_with(b"/dispatch focuswindow address:0x1")


@pytest.mark.asyncio
async def test_hyprctl_failure(mock_open_connection):
    _, reader, _ = mock_open_connection
    reader.read.return_value = b"No such window"
    logger = Mock()

    assert await ipc.hyprctl("closewindow address:0x9", logger=logger) is False
    logger.error.assert_called()


@pytest.mark.asyncio
async def test_hyprctl_weak_failure(mock_open_connection):
    _, reader, _ = mock_open_connection
    reader.read.return_value = b"err"
    logger = Mock()

    assert await ipc.hyprctl("something", logger=logger, weak=True) is False
    logger.warning.assert_called()
    logger.error.assert_not_called()


@pytest.mark.asyncio
async def test_hyprctl_batch(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.return_value = b"okok"

    assert await ipc.hyprctl(["layoutmsg preselect r", "exec kitty"], logger=Mock()) is True
    writer.write.assert_called_with(b"[[BATCH]] dispatch layoutmsg preselect r ; dispatch exec kitty")


@pytest.mark.asyncio
async def test_hyprctl_empty_command(mock_open_connection):
    mock_connect, _, _ = mock_open_connection
    assert await ipc.hyprctl("", logger=Mock()) is False
    mock_connect.assert_not_called()


@pytest.mark.asyncio
async def test_notify(mock_open_connection):
    _, reader, writer = mock_open_connection
    reader.read.return_value = b"ok"

    assert await ipc.notify("hello", 1000, "00ff00", 1, logger=Mock())
    writer.write.assert_called_with(b"/notify 1 1000 rgb(00ff00)  hello")


@pytest.mark.asyncio
async def test_retry_on_reset(mocker):
    sleep = mocker.patch("asyncio.sleep", new_callable=AsyncMock)
    calls = []

    @ipc.retry_on_reset
    async def flaky(*, logger):
        calls.append(1)
        if len(calls) < 3:
            raise ConnectionResetError
        return "done"

    logger = Mock()
    assert await flaky(logger=logger) == "done"
    assert len(calls) == 3
    assert logger.warning.call_count == 2
    assert sleep.await_count == 2


@pytest.mark.asyncio
async def test_retry_gives_up(mocker):
    mocker.patch("asyncio.sleep", new_callable=AsyncMock)

    @ipc.retry_on_reset
    async def broken(*, logger):
        raise ConnectionResetError

    logger = Mock()
    with pytest.raises(ConnectionResetError):
        await broken(logger=logger)
    logger.error.assert_called_once_with("ipc connection failed.")
