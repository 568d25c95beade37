"""Configuration loading and management."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, replace
from pathlib import Path

from .constants import DEFAULT_MAX_FILE_SIZE
from .models import Dialect

CONFIG_TABLE = "css-scanner"

EXTENSION_DIALECTS = {
    ".scss": Dialect.SCSS,
    ".sass": Dialect.SCSS,
    ".less": Dialect.LESS,
    ".hss": Dialect.HSS,
}


@dataclass
class ScannerConfig:
    """Configuration for scanning stylesheets.

    Attributes:
        dialect: Preprocessor dialect, as a `Dialect` or its name
            (``"standard"``, ``"scss"``, ``"less"``, ``"hss"``). None picks
            the dialect from the file extension, falling back to standard CSS.
        fold: Whether fold levels are computed.
        keywords_file: Optional TOML file replacing the built-in keyword lists.
        max_file_size: Maximum file size in bytes that will be read.

    Examples:
        ScannerConfig(dialect="scss", fold=False)
    """

    dialect: Dialect | str | None = None
    fold: bool = True
    keywords_file: str | None = None

    # Limits
    max_file_size: int = DEFAULT_MAX_FILE_SIZE


class ConfigError(ValueError):
    """Exception raised when configuration values are invalid.

    Examples:
        raise ConfigError("`fold` must be a boolean")
    """


def load_config(search_path: Path) -> ScannerConfig:
    """Load configuration from the nearest config file.

    Walks parent directories from `search_path` to the filesystem root, reading
    the ``[tool.css-scanner]`` table from `pyproject.toml` and the
    ``[css-scanner]`` or ``[tool.css-scanner]`` table from `.css-scanner.toml`
    when present. Returns default values when no configuration is found. TOML
    files that cannot be read or decoded are skipped.

    Args:
        search_path: Directory used as the starting point for configuration lookup.

    Returns:
        ScannerConfig: Loaded configuration with defaults applied when necessary.

    Raises:
        ConfigError: If a table is present but not a mapping or contains unsupported keys.

    Examples:
        load_config(Path("styles"))
    """
    current = search_path.resolve()

    while True:
        pyproject_config = _load_from_file(
            current / "pyproject.toml", table_paths=[("tool", CONFIG_TABLE)]
        )
        if pyproject_config is not None:
            return pyproject_config

        dotfile_config = _load_from_file(
            current / f".{CONFIG_TABLE}.toml",
            table_paths=[(CONFIG_TABLE,), ("tool", CONFIG_TABLE)],
        )
        if dotfile_config is not None:
            return dotfile_config

        parent = current.parent
        if parent == current:
            break
        current = parent

    return ScannerConfig()


_MISSING = object()


def _load_from_file(
    config_file: Path, table_paths: list[tuple[str, ...]]
) -> ScannerConfig | None:
    if not config_file.exists():
        return None

    try:
        with open(config_file, "rb") as stream:
            data = tomllib.load(stream)
    except (OSError, tomllib.TOMLDecodeError):
        return None

    for table_path in table_paths:
        raw_config = _extract_table(data, table_path)
        if raw_config is _MISSING:
            continue
        config = _build_config_from_raw(raw_config, config_file, table_path)
        return _resolve_keywords_file(config, config_file.parent)

    return None


def _extract_table(data: object, table_path: tuple[str, ...]) -> object:
    current = data
    for key in table_path:
        if not isinstance(current, dict) or key not in current:
            return _MISSING
        current = current[key]
    return current


def _build_config_from_raw(
    raw_config: object, config_file: Path, table_path: tuple[str, ...]
) -> ScannerConfig:
    table_display = ".".join(table_path)

    if raw_config is None:
        return ScannerConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}")

    if not raw_config:
        return ScannerConfig()

    try:
        return ScannerConfig(**raw_config)
    except TypeError as error:
        raise ConfigError(f"Invalid `[{table_display}]` settings in {config_file}") from error


def _resolve_keywords_file(config: ScannerConfig, base_dir: Path) -> ScannerConfig:
    # Keyword files are relative to the config file that names them.
    if not isinstance(config.keywords_file, str) or not config.keywords_file:
        return config
    keywords_path = Path(config.keywords_file).expanduser()
    if not keywords_path.is_absolute():
        keywords_path = base_dir / keywords_path
    return replace(config, keywords_file=str(keywords_path))


def dialect_for_path(path: Path) -> Dialect:
    """Guess the dialect from a stylesheet's file extension."""
    return EXTENSION_DIALECTS.get(path.suffix.lower(), Dialect.STANDARD)


def normalize_config(
    config: ScannerConfig, default_dialect: Dialect = Dialect.STANDARD
) -> ScannerConfig:
    """Return `config` with the dialect converted to a `Dialect`.

    Args:
        config: Configuration to normalize.
        default_dialect: Dialect used when `config.dialect` is None.

    Raises:
        ConfigError: If the dialect name is unknown.
    """
    dialect = config.dialect
    if dialect is None:
        return replace(config, dialect=default_dialect)
    if isinstance(dialect, Dialect):
        return config
    if not isinstance(dialect, str):
        raise ConfigError("`dialect` must be a string")
    try:
        return replace(config, dialect=Dialect.from_name(dialect))
    except ValueError as error:
        raise ConfigError(str(error)) from error


def validate_config(config: ScannerConfig) -> None:
    """Validate a `ScannerConfig` instance.

    Args:
        config: Configuration to validate.

    Returns:
        None.

    Raises:
        ConfigError: If the dialect is unknown, `fold` is not a boolean, the
            keyword file setting is not a string, or the size limit is not a
            positive integer.

    Examples:
        validate_config(ScannerConfig(dialect="less"))
    """
    normalize_config(config)

    if not isinstance(config.fold, bool):
        raise ConfigError("`fold` must be a boolean")
    if config.keywords_file is not None and not isinstance(config.keywords_file, str):
        raise ConfigError("`keywords_file` must be a string")

    _ensure_integers({"max_file_size": config.max_file_size})
    _ensure_positive({"max_file_size": config.max_file_size})


def apply_overrides(config: ScannerConfig, **overrides: object) -> ScannerConfig:
    """Apply override values to a `ScannerConfig`.

    Args:
        config: Base configuration to update.
        overrides: Override values keyed by configuration field name; values set to
            None are ignored.

    Returns:
        ScannerConfig: New configuration with the provided overrides applied. The
        original configuration is returned when no changes are supplied.

    Raises:
        TypeError: If an override name is not defined on `ScannerConfig`.

    Examples:
        updated = apply_overrides(config, dialect="scss", fold=False)
    """
    changes = {key: value for key, value in overrides.items() if value is not None}
    if not changes:
        return config
    return replace(config, **changes)


def build_config(
    search_path: Path, default_dialect: Dialect = Dialect.STANDARD, **overrides: object
) -> ScannerConfig:
    """Load, override, normalize, and validate configuration.

    Args:
        search_path: Directory where configuration files are resolved.
        default_dialect: Dialect used when neither a config file nor an
            override names one.
        overrides: Override values keyed by configuration attributes; None values
            are ignored.

    Returns:
        ScannerConfig: Validated configuration with a `Dialect` dialect.

    Raises:
        ConfigError: If configuration loading or validation fails.

    Examples:
        config = build_config(Path.cwd(), dialect="less")
    """
    config = load_config(search_path)
    config = apply_overrides(config, **overrides)
    validate_config(config)
    return normalize_config(config, default_dialect)


def _ensure_positive(values: dict[str, int]) -> None:
    for key, value in values.items():
        if value <= 0:
            raise ConfigError(f"`{key}` must be a positive integer")


def _ensure_integers(values: dict[str, object]) -> None:
    for key, value in values.items():
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"`{key}` must be an integer")
