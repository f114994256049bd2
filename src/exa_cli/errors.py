from pathlib import Path


class ExaCliError(Exception):
    """A base exception for the Exa CLI."""

    msg: str

    def __init__(self, msg: str):
        self.msg = msg
        super().__init__(msg)

    def __str__(self) -> str:
        return self.msg


class MissingAPIKeyError(ExaCliError):
    """An exception for when no API key could be found in any source."""

    def __init__(self, env_var: str, config_path: Path | None = None):
        location = f" or save one to {config_path} with `exa configure`" if config_path else " or run `exa configure`"
        super().__init__(f"API key required: set {env_var} environment variable, use --api-key flag{location}")


class MissingArgumentError(ExaCliError):
    def __init__(self, argument: str):
        super().__init__(f"{argument} is required")


class InvalidSummarySchemaError(ExaCliError):
    """An exception for when the summary schema flag is not valid JSON."""

    def __init__(self, reason: str):
        super().__init__(f"invalid summary-schema JSON: {reason}")


class TransportError(ExaCliError):
    """An exception for when the request never produced an HTTP response."""

    def __init__(self, path: str, cause: Exception):
        self.cause = cause
        super().__init__(f"request to {path} failed: {cause}")


class ExaAPIError(ExaCliError):
    """An exception for when the API answers with an error status."""

    status: int

    def __init__(self, status: int, message: str):
        self.status = status
        super().__init__(f"API error ({status}): {message}")


class MalformedResponseError(ExaCliError):
    """An exception for when a successful response cannot be parsed."""

    def __init__(self, path: str, reason: str):
        super().__init__(f"failed to parse response from {path}: {reason}")


class ConfigError(ExaCliError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"failed to load config file {path}: {reason}")


class ConfigSaveError(ExaCliError):
    """An exception for when the config directory or file cannot be written."""

    def __init__(self, action: str, path: Path, reason: str):
        super().__init__(f"failed to {action} {path}: {reason}")


class RenderError(ExaCliError):
    def __init__(self, output_format: str, reason: str):
        super().__init__(f"failed to render {output_format} output: {reason}")
