"""Internal application settings derived from user settings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from batteryguard.settings.user import UserSettings

PACKAGE_DIR = Path(__file__).resolve().parents[1]


@dataclass
class AppPaths:
    """Application file and directory paths.

    Centralizes where blobs are stored, where report templates are read
    from and where the HTML report is written by default.
    """

    data_dir: Path
    templates_dir: Path
    report_html: Path

    @classmethod
    def from_data_dir(cls, data_dir: Path) -> AppPaths:
        """Create paths from the configured data directory."""
        return cls(
            data_dir=data_dir,
            templates_dir=PACKAGE_DIR / "templates",
            report_html=data_dir / "report.html",
        )


class ApplicationSettings:
    """Application settings container.

    Combines user-provided configuration with application defaults.

    Examples:
        user_settings = UserSettings.load()
        app_settings = ApplicationSettings(user_settings)
        blob_dir = app_settings.paths.data_dir
    """

    def __init__(self, user_settings: UserSettings, paths: AppPaths | None = None):
        """Initialize application settings with configuration sources."""
        self.user = user_settings
        self.paths = paths or AppPaths.from_data_dir(user_settings.data_dir)

    @property
    def api_key(self) -> str | None:
        return self.user.resolve_api_key()
