"""Configuration model and loaders for entryscope.

Responsibilities:
- Define resolver conventions and display switches as a typed dataclass.
- Provide loader entry points for YAML- and environment-based configuration.

Key types:
- `ResolverConfig`: normalized settings shared by resolver, renderer and CLI.
- `ConfigLoader`: static construction helpers for `ResolverConfig`.

Precedence for every value is: CLI flag > environment > YAML file > default.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .constants import BIN_DIR, DEFAULT_EXTENSIONS, LABEL_DELIMITER, NODE_MODULES, PACKAGE_JSON
from .parsing import (
    normalize_optional_string,
    parse_extension_list,
    parse_permissive_boolean,
    parse_required_boolean,
)


@dataclass(frozen=True, slots=True)
class ResolverConfig:
    """Settings for one resolution run.

    Attributes:
        manifest_name: File whose presence marks a workspace root.
        dependency_dir: Directory name holding installed dependencies.
        bin_dir: Link directory inside `dependency_dir` holding bin scripts.
        extensions: Extensions probed, in order, when a specifier omits one.
        label_delimiter: Delimiter used when rendering labels.
        colorize: Whether rendered paths and labels carry ANSI decoration.
        debug: Whether per-directory trace diagnostics are written.
    """

    manifest_name: str = PACKAGE_JSON
    dependency_dir: str = NODE_MODULES
    bin_dir: str = BIN_DIR
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    label_delimiter: str = LABEL_DELIMITER
    colorize: bool = True
    debug: bool = False

    @property
    def log_level(self) -> str:
        """Return the diagnostic threshold implied by `debug`."""

        return "DEBUG" if self.debug else "INFO"

    def validate(self) -> None:
        """Validate naming conventions before they reach the filesystem."""

        self._require_name(self.manifest_name, "manifest_name")
        self._require_name(self.dependency_dir, "dependency_dir")
        self._require_name(self.bin_dir, "bin_dir")
        if not self.extensions:
            raise ValueError("`extensions` must name at least one extension.")
        for extension in self.extensions:
            if not extension.startswith(".") or len(extension) < 2:
                raise ValueError(f"`extensions` entry `{extension}` must look like `.js`.")
        if not self.label_delimiter:
            raise ValueError("`label_delimiter` must be a non-empty string.")

    def with_env(self, env: Mapping[str, str] | None = None) -> ResolverConfig:
        """Return a copy with `ENTRYSCOPE_*` environment overrides applied."""

        env_map: Mapping[str, str] = os.environ if env is None else env
        overrides: dict[str, Any] = {}

        for env_key, field_name in ConfigLoader._ENV_NAME_FIELDS.items():
            value = normalize_optional_string(env_map.get(env_key))
            if value is not None:
                overrides[field_name] = value

        raw_extensions = normalize_optional_string(env_map.get("ENTRYSCOPE_EXTENSIONS"))
        if raw_extensions is not None:
            overrides["extensions"] = parse_extension_list(raw_extensions, "ENTRYSCOPE_EXTENSIONS")

        # ENTRYSCOPE_DEBUG is lenient so that `ENTRYSCOPE_DEBUG=anything` turns tracing on.
        raw_debug = normalize_optional_string(env_map.get("ENTRYSCOPE_DEBUG"))
        if raw_debug is not None:
            parsed_debug = parse_permissive_boolean(raw_debug)
            overrides["debug"] = True if parsed_debug is None else parsed_debug

        raw_no_color = normalize_optional_string(env_map.get("ENTRYSCOPE_NO_COLOR"))
        if raw_no_color is not None:
            overrides["colorize"] = not parse_required_boolean(raw_no_color, "ENTRYSCOPE_NO_COLOR")

        config = replace(self, **overrides)
        config.validate()
        return config

    @staticmethod
    def _require_name(value: str, field_name: str) -> None:
        """Validate a single path segment name."""

        if not isinstance(value, str) or not value.strip():
            raise ValueError(f"`{field_name}` must be a non-empty string.")
        if value in (os.curdir, os.pardir) or os.sep in value or "/" in value:
            raise ValueError(f"`{field_name}` must be a single path segment, got `{value}`.")


class ConfigLoader:
    """Factory methods for creating `ResolverConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset(
        {
            "manifest_name",
            "dependency_dir",
            "bin_dir",
            "extensions",
            "label_delimiter",
            "colorize",
            "debug",
        }
    )
    _ENV_NAME_FIELDS = {
        "ENTRYSCOPE_MANIFEST": "manifest_name",
        "ENTRYSCOPE_DEPENDENCY_DIR": "dependency_dir",
        "ENTRYSCOPE_BIN_DIR": "bin_dir",
    }

    @staticmethod
    def from_yaml(path: Path) -> ResolverConfig:
        """Create a validated config from a YAML file."""

        payload = ConfigLoader._parse_yaml_payload(path.read_text(encoding="utf-8"), path)
        return ConfigLoader._build_config_from_mapping(payload, source_label=f"YAML `{path}`")

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> ResolverConfig:
        """Create a validated config from defaults plus environment overrides."""

        return ResolverConfig().with_env(env)

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc

        if payload is None:
            return {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _build_config_from_mapping(payload: Mapping[str, Any], source_label: str) -> ResolverConfig:
        """Build a validated config from a mapping payload."""

        unknown = sorted(set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS))
        if unknown:
            key_list = ", ".join(str(key) for key in unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

        defaults = ResolverConfig()
        values: dict[str, Any] = {}
        for key in ("manifest_name", "dependency_dir", "bin_dir", "label_delimiter"):
            value = ConfigLoader._optional_non_empty_string(payload, key)
            if value is not None:
                values[key] = value
        if "extensions" in payload and payload["extensions"] is not None:
            values["extensions"] = parse_extension_list(payload["extensions"], "extensions")
        values["colorize"] = ConfigLoader._optional_boolean(
            payload, "colorize", source_label, default=defaults.colorize
        )
        values["debug"] = ConfigLoader._optional_boolean(
            payload, "debug", source_label, default=defaults.debug
        )

        config = replace(defaults, **values)
        config.validate()
        return config

    @staticmethod
    def _optional_non_empty_string(payload: Mapping[str, Any], key: str) -> str | None:
        """Read an optional string field and normalize blank values to `None`."""

        if key not in payload:
            return None
        return normalize_optional_string(payload[key])

    @staticmethod
    def _optional_boolean(
        payload: Mapping[str, Any], key: str, source_label: str, default: bool
    ) -> bool:
        """Read and validate a boolean field from a payload."""

        if key not in payload:
            return default

        parsed = parse_permissive_boolean(payload[key])
        if parsed is None:
            raise ValueError(
                f"{source_label} field `{key}` must be a boolean value "
                "(`true`/`false`, `1`/`0`, `yes`/`no`)."
            )
        return parsed
