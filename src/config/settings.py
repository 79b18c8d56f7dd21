"""
Application settings and configuration

Uses pydantic-settings for type-safe configuration via environment variables.
All settings use PREP_ prefix (e.g., PREP_FILE_ENCODING=latin-1).

Settings can also be loaded from a .env file in the project root.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Application configuration via environment variables.

    Environment variables use PREP_ prefix.

    Examples:
        PREP_DEFAULT_DELIMITER=\"
        PREP_FILE_ENCODING=utf-8
        PREP_DEBUG_MODE=true
    """

    model_config = SettingsConfigDict(
        env_prefix="PREP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Source file conventions
    enable_header: str = Field(
        default="$PREP enable\n",
        description="Exact first line that switches a file from pass-through to directive mode",
    )

    directive_prefix: str = Field(
        default="$PREP ",
        description="Prefix introducing a directive line",
    )

    comment_prefix: str = Field(
        default="$$",
        description="Lines starting with this prefix are removed before escaping",
    )

    # Stringify/concat delimiters
    opening_delimiter_variable: str = Field(
        default="OPENING_STRINGIFY_DELIMITER",
        description="Context variable holding the opening stringify delimiter",
    )

    closing_delimiter_variable: str = Field(
        default="CLOSING_STRINGIFY_DELIMITER",
        description="Context variable holding the closing stringify delimiter",
    )

    default_delimiter: str = Field(
        default='"',
        description="Delimiter used on both sides when either delimiter variable is unset",
    )

    # I/O
    file_encoding: str = Field(
        default="utf-8",
        description="Encoding used to read source files",
    )

    debug_mode: bool = Field(
        default=False,
        description="Emit every LOG() trace level regardless of CLI verbosity",
    )

    def body_extract(self, source: str) -> str | None:
        """
        Strip the enable header from a source text.

        Args:
            source: Full contents of a source file

        Returns:
            Text after the header line, or None if the source does not
            start with the header (pass-through file)

        Example:
            >>> settings = AppSettings()
            >>> settings.body_extract("$PREP enable\\nhello")
            'hello'
            >>> settings.body_extract("hello") is None
            True
        """
        if not source.startswith(self.enable_header):
            return None
        return source[len(self.enable_header):]

    def directivePrefix_make(self, name: str, takes_arguments: bool = True) -> str:
        """
        Build the raw line prefix that selects a directive.

        Args:
            name: Directive name (e.g. "include")
            takes_arguments: Whether a separating space follows the name

        Example:
            >>> AppSettings().directivePrefix_make("include")
            '$PREP include '
        """
        prefix = f"{self.directive_prefix}{name}"
        return f"{prefix} " if takes_arguments else prefix


# Singleton instance - import this in your code
appsettings = AppSettings()
