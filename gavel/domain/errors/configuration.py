"""Configuration errors raised at startup."""

from gavel.domain.exceptions import GavelError


class ConfigurationError(GavelError):
    """Raised when required configuration is missing or unusable."""

    code = "configuration_error"

    def __init__(self, setting: str, detail: str) -> None:
        self.setting = setting
        super().__init__(f"{setting}: {detail}")
