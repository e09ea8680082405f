"""Display preferences persisted between console sessions.

The presentation layer receives a ``DisplayPreferences`` object from a
``PreferencesStore`` instead of reading any process-wide state.
"""

from pathlib import Path

from pydantic import field_validator

from consumer_console.api_schemas.base import BaseSchema
from consumer_console.exceptions import ValidationError
from consumer_console.logging import get_logger
from consumer_console.settings import settings

logger = get_logger(__name__)

SUPPORTED_LANGUAGES = ("en-US", "zh-CN")
DEFAULT_LANGUAGE = "en-US"


class DisplayPreferences(BaseSchema):
    language: str = DEFAULT_LANGUAGE

    @field_validator("language")
    @classmethod
    def check_supported(cls, value: str) -> str:
        if value not in SUPPORTED_LANGUAGES:
            raise ValueError(f"unsupported language {value!r}")
        return value


class PreferencesStore:
    """Reads and writes ``DisplayPreferences`` as a small JSON file."""

    def __init__(self, path: Path | str | None = None):
        self.path = Path(path) if path else settings.PREFERENCES_PATH

    def load(self) -> DisplayPreferences:
        """Persisted preferences, or defaults when none are stored."""
        if not self.path.exists():
            return DisplayPreferences()
        try:
            return DisplayPreferences.model_validate_json(self.path.read_text("utf-8"))
        except (OSError, ValueError) as e:
            logger.warning(
                "Ignoring unreadable preferences file",
                path=str(self.path),
                error=str(e),
            )
            return DisplayPreferences()

    def update(self, language: str) -> DisplayPreferences:
        """Change the display language and write it through immediately."""
        if language not in SUPPORTED_LANGUAGES:
            raise ValidationError({"language": f"unsupported language {language!r}"})
        preferences = DisplayPreferences(language=language)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(preferences.model_dump_json(), "utf-8")
        logger.info("Display language changed", language=language)
        return preferences
