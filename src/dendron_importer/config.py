from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Mapping

from .models import TransformOptions


CONFIG_FILE = Path("config.toml")

DEFAULT_ASSET_EXTENSIONS: tuple[str, ...] = (
    ".png",
    ".jpg",
    ".jpeg",
    ".gif",
    ".webp",
    ".svg",
    ".pdf",
    ".mp3",
    ".mp4",
    ".wav",
)
DEFAULT_IGNORED_DIRS: tuple[str, ...] = ("node_modules",)


@dataclass(slots=True)
class RuntimeConfig:
    output_dir: Path = Path("runs")
    log_file: str = "log.jsonl"
    summary_csv: str = "summary.csv"
    enable_local_api: bool = False


@dataclass(slots=True)
class ImportConfig:
    """Saved paths and toggles used when the caller does not pass its own."""

    source: Path | None = None
    target: Path | None = None
    convert_hierarchy: bool = True
    preserve_metadata: bool = True
    convert_wiki_links: bool = True
    create_hierarchy_stubs: bool = False
    handle_assets: bool = True

    def to_options(self) -> TransformOptions:
        return TransformOptions(
            convert_hierarchy=self.convert_hierarchy,
            preserve_metadata=self.preserve_metadata,
            convert_wiki_links=self.convert_wiki_links,
            create_hierarchy_stubs=self.create_hierarchy_stubs,
            handle_assets=self.handle_assets,
        )


@dataclass(slots=True)
class VaultConfig:
    config_marker: str = ".obsidian"
    markdown_extension: str = ".md"
    asset_extensions: tuple[str, ...] = DEFAULT_ASSET_EXTENSIONS
    ignored_dirs: tuple[str, ...] = DEFAULT_IGNORED_DIRS
    validation_depth: int = 2
    stub_extension: str = "yml"


@dataclass(slots=True)
class APIConfig:
    host: str = "127.0.0.1"
    port: int = 8000


@dataclass(slots=True)
class AppConfig:
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    importer: ImportConfig = field(default_factory=ImportConfig)
    vault: VaultConfig = field(default_factory=VaultConfig)
    api: APIConfig = field(default_factory=APIConfig)


def _read_toml(path: Path) -> Mapping[str, object]:
    if not path.exists():
        return {}
    with path.open("rb") as handle:
        return tomllib.load(handle)


def _section(raw: Mapping[str, object], name: str) -> Mapping[str, object] | None:
    value = raw.get(name)
    return value if isinstance(value, Mapping) else None


def _optional_path(value: object | None) -> Path | None:
    if not value:
        return None
    return Path(str(value)).expanduser()


def _tuple_of_strings(value: object | None, default: Iterable[str]) -> tuple[str, ...]:
    if value is None:
        return tuple(default)
    if isinstance(value, str):
        return (value,)
    if isinstance(value, Iterable):
        return tuple(str(item) for item in value)
    raise TypeError(f"Unsupported list configuration: {value!r}")


def _normalize_extensions(values: Iterable[str]) -> tuple[str, ...]:
    normalized: list[str] = []
    for value in values:
        ext = value.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = f".{ext}"
        normalized.append(ext)
    return tuple(normalized)


def _build_runtime(data: Mapping[str, object] | None) -> RuntimeConfig:
    if not data:
        return RuntimeConfig()
    return RuntimeConfig(
        output_dir=Path(str(data.get("output_dir", "runs"))),
        log_file=str(data.get("log_file", "log.jsonl")),
        summary_csv=str(data.get("summary_csv", "summary.csv")),
        enable_local_api=bool(data.get("enable_local_api", False)),
    )


def _build_import(data: Mapping[str, object] | None) -> ImportConfig:
    if not data:
        return ImportConfig()
    return ImportConfig(
        source=_optional_path(data.get("source")),
        target=_optional_path(data.get("target")),
        convert_hierarchy=bool(data.get("convert_hierarchy", True)),
        preserve_metadata=bool(data.get("preserve_metadata", True)),
        convert_wiki_links=bool(data.get("convert_wiki_links", True)),
        create_hierarchy_stubs=bool(data.get("create_hierarchy_stubs", False)),
        handle_assets=bool(data.get("handle_assets", True)),
    )


def _build_vault(data: Mapping[str, object] | None) -> VaultConfig:
    if not data:
        return VaultConfig()
    extensions = _tuple_of_strings(data.get("asset_extensions"), DEFAULT_ASSET_EXTENSIONS)
    return VaultConfig(
        config_marker=str(data.get("config_marker", ".obsidian")),
        markdown_extension=str(data.get("markdown_extension", ".md")),
        asset_extensions=_normalize_extensions(extensions),
        ignored_dirs=_tuple_of_strings(data.get("ignored_dirs"), DEFAULT_IGNORED_DIRS),
        validation_depth=max(0, int(data.get("validation_depth", 2))),
        stub_extension=str(data.get("stub_extension", "yml")).lstrip("."),
    )


def _build_api(data: Mapping[str, object] | None) -> APIConfig:
    if not data:
        return APIConfig()
    return APIConfig(host=str(data.get("host", "127.0.0.1")), port=int(data.get("port", 8000)))


def load_config(path: Path | None = None) -> AppConfig:
    path = path or CONFIG_FILE
    raw = _read_toml(path)
    return AppConfig(
        runtime=_build_runtime(_section(raw, "runtime")),
        importer=_build_import(_section(raw, "import")),
        vault=_build_vault(_section(raw, "vault")),
        api=_build_api(_section(raw, "api")),
    )


def dump_config(config: AppConfig) -> str:
    payload = {
        "runtime": {
            "output_dir": str(config.runtime.output_dir),
            "log_file": config.runtime.log_file,
            "summary_csv": config.runtime.summary_csv,
            "enable_local_api": config.runtime.enable_local_api,
        },
        "import": {
            "source": str(config.importer.source) if config.importer.source else "",
            "target": str(config.importer.target) if config.importer.target else "",
            **config.importer.to_options().as_dict(),
        },
        "vault": {
            "config_marker": config.vault.config_marker,
            "markdown_extension": config.vault.markdown_extension,
            "asset_extensions": list(config.vault.asset_extensions),
            "ignored_dirs": list(config.vault.ignored_dirs),
            "validation_depth": config.vault.validation_depth,
            "stub_extension": config.vault.stub_extension,
        },
        "api": {
            "host": config.api.host,
            "port": config.api.port,
        },
    }
    return json.dumps(payload, indent=2)
