"""Application state and configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from bumpcat.core.base import BaseConfig, BaseState
from bumpcat.core.log import Logger
from bumpcat.core.result import TrialRecord
from bumpcat.core.yaml_settings import (
    CONFIG_FILENAME,
    YamlWithIncludesSettingsSource,
)
from bumpcat.upgrade.report import SessionReport
from bumpcat.upgrade.status import UpgradeMode

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_log_dir}, {os.getcwd}, {Path.cwd}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}

# ============================================================
# CONFIG MODELS (loaded from YAML/env/CLI)
# ============================================================

class ProjectConfig(BaseConfig):
    """The project whose dependencies are upgraded."""

    workdir: Path = Field(
        default=Path("."),
        description="Project directory (where the manifest lives)"
    )
    manifest: str = Field(
        default="package.json",
        description="Dependency manifest, relative to workdir"
    )
    lock_file: str = Field(
        default="pnpm-lock.yaml",
        description="Lock file, relative to workdir"
    )


class PackageManagerConfig(BaseConfig):
    """Package manager commands.

    Upgrade commands take a {packages} placeholder which receives the
    shell-quoted package names of the batch.
    """

    outdated_latest: str = Field(
        default="pnpm outdated --no-table",
        description="Lists packages with a newer latest version"
    )
    outdated_compatible: str = Field(
        default="pnpm outdated --no-table --compatible",
        description=(
            "Lists packages with a newer version inside the manifest's "
            "ranges. Empty to skip the compatible session."
        )
    )
    outdated_format: Literal["pnpm", "lines", "pip-json"] = Field(
        default="pnpm",
        description="Output format of the outdated commands"
    )
    upgrade_latest: str = Field(
        default="pnpm up {packages} --latest",
        description="Upgrades the batch to latest versions"
    )
    upgrade_compatible: str = Field(
        default="pnpm up {packages}",
        description="Upgrades the batch to the highest compatible versions"
    )
    install: str = Field(
        default="pnpm install",
        description="Full install, also used to normalize the lock file"
    )


class CheckConfig(BaseConfig):
    """Test suite used as the pass/fail oracle."""

    command: str = Field(
        default="pnpm test",
        description="Test command; exit status 0 means pass"
    )
    output_dir: Path = Field(
        default=Path("{config.log_root}/tests"),
        description=(
            "Directory for test run logs (supports {config.*} templates)"
        )
    )
    timeout: int | None = Field(
        default=None,
        description="Timeout for one test run in seconds (none by default)"
    )


class BackupConfig(BaseConfig):
    """Snapshot naming."""

    suffix: str = Field(
        default=".bumpcat-backup",
        description="Appended to the manifest/lock file names for snapshots"
    )


class UpgradeConfig(BaseConfig):
    """Which upgrade sessions run, in order."""

    modes: list[UpgradeMode] = Field(
        default_factory=lambda: [UpgradeMode.LATEST, UpgradeMode.COMPATIBLE],
        description="Upgrade modes to run: latest, compatible"
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    project: ProjectConfig = Field(default_factory=ProjectConfig)
    package_manager: PackageManagerConfig = Field(
        default_factory=PackageManagerConfig
    )
    test: CheckConfig = Field(default_factory=CheckConfig)
    backup: BackupConfig = Field(default_factory=BackupConfig)
    upgrade: UpgradeConfig = Field(default_factory=UpgradeConfig)

    log_level: str = Field(
        default="info",
        alias="log-level",
        description=(
            "Console log level: 'spew', 'trace', 'debug', 'info', "
            "'warn', 'error', 'fatal'"
        ),
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir("bumpcat",
                                                     appauthor=False))
        ),
        description=(
            "Root directory for all log files "
            "(supports {platformdirs.*} templates)"
        ),
    )

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Install the global logger from the logger section."""
        from bumpcat.core.log import setup_logger
        from bumpcat.core.yaml_settings import _cleanup_bootstrap_logger

        if self.logger is None:
            self.logger = Logger(level=self.log_level)
        elif "log_level" in self.model_fields_set:
            self.logger.console.level = self.log_level

        setup_logger(
            log_root=self.log_root,
            session_name=self.project.workdir.resolve().name or "root",
            level=self.logger.level,
            console=self.logger.console,
            file=self.logger.file,
            logfire=self.logger.logfire,
        )

        _cleanup_bootstrap_logger()
        return self

    def close(self):
        """Close the global logger too, then the config children."""
        from bumpcat.core.log import logger
        logger.close()
        super().close()


# ============================================================
# RUNTIME STATE MODELS (mutable during workflow execution)
# ============================================================

class UpgradeState(BaseState):
    """Upgrade workflow runtime state."""

    status: str = Field(
        default="pending",
        description="Workflow status: pending, running, complete, failed"
    )
    current_mode: UpgradeMode | None = Field(default=None)
    reports: dict[UpgradeMode, SessionReport] = Field(
        default_factory=dict,
        description="Finished sessions by mode"
    )
    history: list[TrialRecord] = Field(
        default_factory=list,
        description="Every trial of every session, in order"
    )
    session: Any = Field(
        default=None,
        description="UpgradeSession wired to this project"
    )

    model_config = ConfigDict(arbitrary_types_allowed=True)


class RestoreState(BaseState):
    """Restore workflow runtime state."""

    discard: bool = Field(
        default=False,
        description="Delete leftover snapshots instead of restoring them"
    )
    files: list[Path] = Field(
        default_factory=list,
        description="Files restored or snapshots discarded"
    )
    status: str = Field(default="pending")


class Runtime(BaseModel):
    """All runtime state, one section per workflow."""

    upgrade: UpgradeState = Field(default_factory=UpgradeState)
    restore: RestoreState = Field(default_factory=RestoreState)


# ============================================================
# STATE (config + runtime combined)
# ============================================================

class State(BaseSettings):
    """Configuration plus runtime state; flows through every workflow.

    Being a BaseSettings, it loads from YAML, .env, environment
    variables (BUMPCAT_CONFIG__TEST__COMMAND=...) and the command line.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)"
    )
    runtime: Runtime = Field(
        default_factory=Runtime,
        description="Runtime state (mutates during workflow execution)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=CONFIG_FILENAME,
        env_file=".env",
        env_prefix="BUMPCAT_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority: init args, YAML layers, .env, environment, secrets."""
        return (
            init_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            dotenv_settings,
            env_settings,
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {config.*} style templates in every string and Path."""
        self._substitute_recursive(self.config)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            new = self._substitute_string(value)
            return value if new == value else new
        elif isinstance(value, Path):
            new = self._substitute_string(str(value))
            return value if new == str(value) else Path(new)
        elif isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {field.path} templates with actual field values.

        Examples:
            "{config.log_root}/tests" -> "/home/user/.local/state/bumpcat/tests"
            "{platformdirs.user_cache_dir}" -> "/home/user/.cache/bumpcat"

        Unknown references are left unchanged, so command templates
        such as "pnpm up {packages}" survive.
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                module = parts[0]
                obj = TEMPLATE_NAMESPACE[module]
                parts = parts[1:]
            else:
                module = None
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)

                if callable(obj):
                    obj = (
                        obj('bumpcat', appauthor=False)
                        if module == 'platformdirs' else obj()
                    )

                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace_template, value)


__all__ = [
    "State",
    "Config",
    "ProjectConfig",
    "PackageManagerConfig",
    "CheckConfig",
    "BackupConfig",
    "UpgradeConfig",
]
