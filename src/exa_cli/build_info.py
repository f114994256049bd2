import os
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as distribution_version
from typing import ClassVar, Self

from pydantic import BaseModel, ConfigDict

DISTRIBUTION_NAME = "exa-cli"
COMMIT_ENV_VAR = "EXA_CLI_COMMIT"
BUILD_DATE_ENV_VAR = "EXA_CLI_BUILD_DATE"


class BuildInfo(BaseModel):
    """Version metadata handed to the CLI at startup."""

    model_config: ClassVar[ConfigDict] = ConfigDict(frozen=True)

    version: str = "dev"
    commit: str = "none"
    date: str = "unknown"

    @classmethod
    def from_environment(cls) -> Self:
        try:
            installed_version = distribution_version(DISTRIBUTION_NAME)
        except PackageNotFoundError:
            installed_version = "dev"

        return cls(
            version=installed_version,
            commit=os.getenv(COMMIT_ENV_VAR, "none"),
            date=os.getenv(BUILD_DATE_ENV_VAR, "unknown"),
        )

    def describe(self, program: str) -> str:
        return f"{program} {self.version}\n  commit: {self.commit}\n  built:  {self.date}\n"
