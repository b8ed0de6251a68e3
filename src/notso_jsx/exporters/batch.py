"""Convert a list of assets described by a JSON settings file."""

import filecmp
import json
import shutil
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from rich.markup import escape

from notso_jsx.exporters.jsx import ConvertConfig, convert
from notso_jsx.utils.constants import VERBOSE_OPTIONS, JsxConfig
from notso_jsx.utils.logging import (
    bright_green,
    cyan,
    dim,
    log_error,
    log_info,
    log_ok,
    log_warn,
    print_header,
)
from notso_jsx.utils.naming import component_name

JSX_OPTIONS = frozenset(f.name for f in fields(JsxConfig))
CONVERT_OPTIONS = frozenset(f.name for f in fields(ConvertConfig)) - {"jsx", "root"}
# JSON keys in the camelCase spelling of gltfjsx batch settings files
OPTION_ALIASES: dict[str, str] = {"printWidth": "print_width"}


@dataclass
class BatchAsset:
    gltf: Path
    class_name: str
    options: dict[str, Any] = field(default_factory=dict)


@dataclass
class BatchSettings:
    src_dir: Path
    public_dir: Path | None
    default_options: dict[str, Any]
    assets: list[BatchAsset]


@dataclass
class BatchResult:
    converted: list[Path] = field(default_factory=list)
    failed: list[tuple[Path, str]] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def load_settings(settings_path: str | Path) -> BatchSettings:
    """
    Read a batch settings file.

    Relative paths resolve against the settings file's directory.

    Raises:
        ValueError: malformed settings
    """
    settings_path = Path(settings_path)
    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid settings file {settings_path}: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"Settings must be a JSON object: {settings_path}")

    base = settings_path.parent
    try:
        src_dir = base / data["srcDir"]
        raw_assets = data["assets"]
    except KeyError as e:
        raise ValueError(f"Settings missing required key {e}") from e

    assets = []
    for raw in raw_assets:
        if "gltf" not in raw:
            raise ValueError(f"Asset entry without 'gltf': {raw!r}")
        gltf = base / raw["gltf"]
        assets.append(
            BatchAsset(
                gltf=gltf,
                class_name=raw.get("className") or component_name(gltf.stem),
                options=dict(raw.get("options") or {}),
            )
        )

    public_dir = data.get("publicDir")
    return BatchSettings(
        src_dir=src_dir,
        public_dir=base / public_dir if public_dir else None,
        default_options=dict(data.get("defaultOptions") or {}),
        assets=assets,
    )


def build_config(options: dict[str, Any]) -> ConvertConfig:
    """Split merged options into generation and pipeline settings."""
    jsx: dict[str, Any] = {}
    pipeline: dict[str, Any] = {}
    for key, value in options.items():
        key = OPTION_ALIASES.get(key, key)
        if key == "verbose":
            if value:
                jsx.update(dict.fromkeys(VERBOSE_OPTIONS, True))
        elif key in JSX_OPTIONS:
            jsx[key] = value
        elif key in CONVERT_OPTIONS:
            pipeline[key] = value
        else:
            log_warn(f"Ignoring unknown batch option {cyan(key)}")
    return ConvertConfig(jsx=JsxConfig(**jsx), **pipeline)


def publish_asset(asset: Path, public_dir: Path) -> bool:
    """Copy an asset into the public directory. False when already identical."""
    target = public_dir / asset.name
    if target.exists() and filecmp.cmp(asset, target, shallow=False):
        return False
    public_dir.mkdir(parents=True, exist_ok=True)
    shutil.copy2(asset, target)
    return True


def run_batch(settings_path: str | Path, keep_going: bool = False) -> BatchResult:
    """
    Convert every asset of a settings file, one after another.

    Args:
        settings_path: JSON file with srcDir, publicDir, defaultOptions, assets
        keep_going: Continue with the next asset after a failure

    Returns:
        Converted outputs and failures
    """
    settings = load_settings(settings_path)
    result = BatchResult()
    total = len(settings.assets)
    print_header(f"BATCH: {total} asset(s)")

    for index, asset in enumerate(settings.assets, start=1):
        config = build_config({**settings.default_options, **asset.options})
        suffix = ".tsx" if config.jsx.types else ".jsx"
        output = settings.src_dir / f"{asset.class_name}{suffix}"
        log_info(f"[{index}/{total}] {cyan(asset.gltf.name)}")

        try:
            source = asset.gltf
            if settings.public_dir is not None:
                if not source.is_file():
                    raise FileNotFoundError(f"File not found: {source}")
                published = settings.public_dir / source.name
                if publish_asset(source, settings.public_dir):
                    log_ok(f"Copied to {escape(str(published))}")
                else:
                    log_info(dim(f"Unchanged: {published}"))
                # The browser loads the published copy
                source = published
                if config.root is None:
                    config.root = settings.public_dir
            converted = convert(source, output, config)
        except (OSError, ValueError, RuntimeError) as e:
            result.failed.append((asset.gltf, str(e)))
            log_error(f"{escape(asset.gltf.name)}: {escape(str(e))}")
            if not keep_going:
                raise
            continue
        result.converted.append(converted)

    log_ok(
        f"Converted {bright_green(str(len(result.converted)))} of {total} asset(s)"
    )
    return result
