" generic fixtures "
from unittest.mock import Mock

import pytest

from winpick.adapters.menus import RofiMenu
from winpick.selector import SessionGuard

from .testtools import FakeBackend


def pytest_configure():
    "Runs once before all"
    from winpick.logging_setup import init_logger

    init_logger("/dev/null", force_debug=True)


def make_client(address, class_name, title, focus, **kw):
    client = {
        "address": address,
        "mapped": True,
        "hidden": False,
        "at": [0, 0],
        "size": [800, 600],
        "workspace": {"id": 1, "name": "1"},
        "floating": False,
        "monitor": 0,
        "class": class_name,
        "title": title,
        "initialClass": class_name,
        "initialTitle": title,
        "pid": 1000 + focus,
        "focusHistoryID": focus,
    }
    client.update(kw)
    return client


CLIENTS = [
    make_client("0xa1", "firefox", "Mozilla Firefox", 2),
    make_client("0xa2", "kitty", "~/src", 0),
    make_client("0xa3", "kitty", "htop", 1),
    make_client("0xa4", "Emacs", "init.el", 3),
    make_client("0xa5", "steam", "Friends List", 4, hidden=True),
    make_client("0xa6", "xdg-desktop-portal-gtk", "", 5, mapped=False),
    make_client("0xa7", "kitty", "scratch", 6, monitor=-1),
]
"the focused window is 0xa2, 0xa5 to 0xa7 are not managed"


@pytest.fixture
def test_logger():
    from winpick.logging_setup import get_logger

    return get_logger("tests")


@pytest.fixture
def backend(test_logger):
    return FakeBackend(test_logger, CLIENTS, active="0xa2")


@pytest.fixture
def guard():
    return SessionGuard()


@pytest.fixture
def rofi():
    "A rofi engine, `run` must be scripted by the test"
    return RofiMenu()


@pytest.fixture
def mock_log():
    return Mock()
