"""Configuration management for the PIAWE calculator CLI."""

import logging
import toml
from pathlib import Path
from dataclasses import dataclass

from .models import Jurisdiction

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class CalculationConfig:
    default_jurisdiction: str

    def __post_init__(self):
        # Reject unknown codes at load time rather than at calculation time
        self.default_jurisdiction = Jurisdiction(str(self.default_jurisdiction).upper()).value


@dataclass
class OutputConfig:
    log_level: str
    output_folder: str
    json_indent: int
    console_summary: bool
    log_file: str = ""

    def __post_init__(self):
        level = str(self.log_level).upper()
        if level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level '{self.log_level}'; expected one of {', '.join(LOG_LEVELS)}"
            )
        self.log_level = level

    @property
    def level(self) -> int:
        return getattr(logging, self.log_level)


@dataclass
class Config:
    calculation: CalculationConfig
    output: OutputConfig

    @classmethod
    def default(cls) -> "Config":
        return cls(
            calculation=CalculationConfig(default_jurisdiction="NSW"),
            output=OutputConfig(
                log_level="INFO",
                output_folder="output",
                json_indent=2,
                console_summary=True,
                log_file="piawe.log",
            ),
        )

    @classmethod
    def load(cls, config_path: str = "piawe.toml") -> "Config":
        """Load configuration from TOML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is malformed or a section or key is missing or unknown.
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        data = toml.load(config_file)

        sections = {}
        for name, section in (("calculation", CalculationConfig), ("output", OutputConfig)):
            if not isinstance(data.get(name), dict):
                raise ValueError(f"Configuration file {config_path} is missing the [{name}] section")
            try:
                sections[name] = section(**data[name])
            except TypeError as e:
                raise ValueError(f"Invalid [{name}] section in {config_path}: {e}") from e

        return cls(**sections)
