"""Shared constants for winpick."""

import os
from pathlib import Path

__all__ = [
    "AUTO_WIDTH",
    "CONFIG_FILE",
    "CONTROL",
    "DEFAULT_END_MARKER",
    "DEFAULT_KEYS",
    "DEFAULT_NOTIFICATION_DURATION_MS",
    "ERROR_NOTIFICATION_DURATION_MS",
    "HYPRLAND_INSTANCE_SIGNATURE",
    "IPC_FOLDER",
    "IPC_MAX_RETRIES",
    "IPC_RETRY_DELAY_MULTIPLIER",
    "MAX_CUSTOM_KEYS",
    "TASK_TIMEOUT",
]

HYPRLAND_INSTANCE_SIGNATURE = os.environ.get("HYPRLAND_INSTANCE_SIGNATURE", "NO_INSTANCE")

MAX_SOCKET_FILE_LEN = 15
MAX_SOCKET_PATH_LEN = 108

_runtime_dir = os.environ.get("XDG_RUNTIME_DIR", "/tmp")  # noqa: S108
_hypr_folder = f"{_runtime_dir}/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"
if not os.path.exists(_hypr_folder):
    _hypr_folder = f"/tmp/hypr/{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108

# AF_UNIX paths are limited to 108 bytes, use a short symlink when needed
if len(_hypr_folder) >= MAX_SOCKET_PATH_LEN - MAX_SOCKET_FILE_LEN:
    IPC_FOLDER = f"/tmp/.winpick-{HYPRLAND_INSTANCE_SIGNATURE}"  # noqa: S108
    if not os.path.exists(IPC_FOLDER) and os.path.exists(_hypr_folder):
        os.symlink(_hypr_folder, IPC_FOLDER)
else:
    IPC_FOLDER = _hypr_folder

CONTROL = f"{IPC_FOLDER}/.winpick.sock"

_xdg_config_home = Path(os.environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
CONFIG_FILE = _xdg_config_home / "winpick" / "config.toml"

TASK_TIMEOUT = 35.0

# Notification durations (milliseconds)
DEFAULT_NOTIFICATION_DURATION_MS = 5000
ERROR_NOTIFICATION_DURATION_MS = 8000

# IPC retry settings
IPC_MAX_RETRIES = 3
IPC_RETRY_DELAY_MULTIPLIER = 0.5

# Title column
AUTO_WIDTH = "auto"
DEFAULT_END_MARKER = "..."

# rofi exposes kb-custom-1 .. kb-custom-19
MAX_CUSTOM_KEYS = 19

# action name -> rofi key binding
DEFAULT_KEYS = {
    "switch_other_window": "Alt+o",
    "switch_other_frame": "Alt+O",
    "kill": "Alt+k",
    "toggle_detail": "Alt+t",
}
