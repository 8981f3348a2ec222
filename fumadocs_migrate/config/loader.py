"""Config file discovery, YAML loading and ``${VAR}`` expansion."""

import os
import re
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .models import MigrateConfig

CONFIG_FILENAME = "fumadocs-migrate.yaml"

# ${VAR} or ${VAR:-fallback}
_ENV_REF_RE = re.compile(r"\$\{(\w+)(?::-([^}]*))?\}")


def config_search_paths() -> list[Path]:
    """Project-local file first, then the per-user one."""
    return [Path(CONFIG_FILENAME), Path.home() / ".fumadocs-migrate" / "config.yaml"]


def load_config_with_source(cli_path: str | None = None) -> tuple[MigrateConfig, Path | None]:
    """Resolve the config and the file it came from (``None`` for built-in defaults).

    An explicit path must exist. Empty files are skipped in favour of the
    next candidate.
    """
    candidates = config_search_paths()
    if cli_path:
        explicit = Path(cli_path)
        if not explicit.exists():
            raise ValueError(f"Config file not found: {cli_path}")
        candidates.insert(0, explicit)

    for path in candidates:
        if not path.exists():
            continue
        raw = _read_mapping(path)
        if raw is None:
            continue
        try:
            return MigrateConfig.model_validate(_expand_env_vars(raw)), path
        except ValidationError as e:
            raise ValueError(f"Invalid config in {path}: {e}") from e

    return MigrateConfig(), None


def load_config(cli_path: str | None = None) -> MigrateConfig:
    return load_config_with_source(cli_path)[0]


def _read_mapping(path: Path) -> dict[str, Any] | None:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {path}: {e}") from e
    if raw is not None and not isinstance(raw, dict):
        raise ValueError(f"Invalid config in {path}: expected a mapping")
    return raw


def _expand_env_vars(obj: object) -> object:
    """Expand ``${VAR}`` and ``${VAR:-fallback}`` in every string of a loaded document.

    Unset or empty variables expand to the fallback, or to ``""``.
    """
    if isinstance(obj, str):
        return _ENV_REF_RE.sub(lambda m: os.environ.get(m.group(1)) or m.group(2) or "", obj)
    if isinstance(obj, dict):
        return {k: _expand_env_vars(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_expand_env_vars(v) for v in obj]
    return obj


# Written by `fumadocs-migrate config init`
DEFAULT_CONFIG_TEMPLATE = """\
# fumadocs-migrate.yaml

# Content roots, relative to the project root
content:
  roots:
    - content/docs
    - content/guides
    - content/_snippets
  extension: ".mdx"
  exclude_dirs: [node_modules]   # hidden directories are always skipped
  guide_marker: "/guides/"

# Version substitution (skipped when the file is missing)
version:
  file: ".repos/bun/LATEST"
  # value: "${BUN_VERSION:-1.3.1}"   # overrides the file
  placeholder: "$BUN_LATEST_VERSION"

# Link rewriting
links:
  image_base_url: "https://bun.com/docs/images"

# Pass selection
pipeline:
  extra_passes: []               # step-indentation | tabs-items | tabs-unwrap
  disabled_passes: []

# Console report
report:
  max_warnings: 10
  progress_every: 50

# Logging
log_level: "info"              # debug | info | warn | error
log_format: "text"             # text | json
"""
