import json
from pathlib import Path

from dendron_importer.config import AppConfig, dump_config, load_config
from dendron_importer.models import TransformOptions
from dendron_importer.settings import Settings, prepare_config


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    config = load_config(tmp_path / "absent.toml")
    assert config == AppConfig()
    assert config.importer.to_options() == TransformOptions()
    assert ".png" in config.vault.asset_extensions


def test_load_config_reads_sections(tmp_path: Path) -> None:
    path = tmp_path / "config.toml"
    path.write_text(
        """
[runtime]
output_dir = "logs"
enable_local_api = true

[import]
source = "~/Obsidian"
target = "/srv/dendron"
preserve_metadata = false
create_hierarchy_stubs = true

[vault]
asset_extensions = ["PNG", ".heic"]
ignored_dirs = ["node_modules", "templates"]
stub_extension = ".yaml"

[api]
port = 9001
""",
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.runtime.output_dir == Path("logs")
    assert config.runtime.enable_local_api is True
    assert config.importer.source == Path("~/Obsidian").expanduser()
    assert config.importer.target == Path("/srv/dendron")
    options = config.importer.to_options()
    assert options.preserve_metadata is False
    assert options.create_hierarchy_stubs is True
    assert options.convert_hierarchy is True
    assert config.vault.asset_extensions == (".png", ".heic")
    assert config.vault.ignored_dirs == ("node_modules", "templates")
    assert config.vault.stub_extension == "yaml"
    assert config.api.port == 9001
    assert config.api.host == "127.0.0.1"


def test_dump_config_is_json() -> None:
    payload = json.loads(dump_config(AppConfig()))
    assert payload["import"]["convert_wiki_links"] is True
    assert payload["vault"]["config_marker"] == ".obsidian"


def test_environment_overrides_local_api(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("DENDRON_IMPORTER_ENABLE_LOCAL_API", "true")
    monkeypatch.setenv("DENDRON_IMPORTER_CONFIG_PATH", str(tmp_path / "none.toml"))
    settings = Settings()
    assert settings.config_path == tmp_path / "none.toml"
    config = prepare_config(settings)
    assert config.runtime.enable_local_api is True
