# src/mailcheck/core/utils/path_utils.py
from pathlib import Path


class PathUtils:
    """
    Where mailcheck keeps its files: packaged defaults next to the code,
    everything user specific under ~/.mailcheck.
    """

    # --- Package specific paths ---

    @staticmethod
    def get_shell_package_root() -> Path:
        """Directory of the 'mailcheck' package (holds the default settings.json)."""
        return Path(__file__).resolve().parents[2]

    @staticmethod
    def get_settings_file() -> Path:
        return PathUtils.get_shell_package_root() / "settings.json"

    # --- User specific paths ---

    @staticmethod
    def get_user_config_dir() -> Path:
        return Path.home() / ".mailcheck"

    @staticmethod
    def get_user_settings_file() -> Path:
        """Optional overrides of the packaged settings (~/.mailcheck/settings.json)."""
        return PathUtils.get_user_config_dir() / "settings.json"

    @staticmethod
    def get_upload_dir() -> Path:
        """Default upload directory of the web server (~/.mailcheck/uploads)."""
        return PathUtils.get_user_config_dir() / "uploads"
