import pytest

from pzsdev.config.loader import DEFAULT_CONFIG, ConfigError, get_config_value, load_config


@pytest.mark.unit
def test_load_config_defaults_without_file(isolated_cwd):
    cfg = load_config()

    assert cfg["root"] == isolated_cwd.resolve()
    assert cfg["config_file"] is None
    assert cfg["paths"]["source"] == (isolated_cwd / "game" / "game.pzs").resolve()
    assert cfg["paths"]["template"] == (isolated_cwd / "puzzlescript" / "standalone_inlined.txt").resolve()
    assert cfg["paths"]["output"] == (isolated_cwd / "dist" / "game.html").resolve()
    assert cfg["paths"]["editor"] == "editor.html"
    assert cfg["server"]["port"] == 3000
    assert cfg["export"]["default_title"] == "PuzzleScript Game"


@pytest.mark.unit
def test_load_config_does_not_mutate_defaults(isolated_cwd):
    cfg = load_config()
    cfg["server"]["port"] = 1

    assert DEFAULT_CONFIG["server"]["port"] == 3000
    assert DEFAULT_CONFIG["paths"]["source"] == "game/game.pzs"


@pytest.mark.unit
def test_load_config_finds_file_in_cwd(isolated_cwd):
    (isolated_cwd / "pzsdev.yaml").write_text("server:\n  port: 4000\n")

    cfg = load_config()

    assert cfg["server"]["port"] == 4000
    assert cfg["config_file"] == (isolated_cwd / "pzsdev.yaml").resolve()


@pytest.mark.unit
def test_load_config_merges_over_defaults(make_config):
    config_path = make_config({"server": {"port": 8080}, "export": {"armorgames": True}})

    cfg = load_config(str(config_path))

    assert cfg["server"]["port"] == 8080
    assert cfg["server"]["host"] == "127.0.0.1"
    assert cfg["export"]["armorgames"] is True
    assert cfg["export"]["default_title"] == "PuzzleScript Game"
    assert cfg["logging"]["console"] is False


@pytest.mark.unit
def test_load_config_resolves_paths_against_config_dir(tmp_path, isolated_cwd):
    project = tmp_path / "elsewhere"
    project.mkdir()
    config_path = project / "pzsdev.yaml"
    config_path.write_text("paths:\n  source: src/my_game.txt\n  output: /tmp/out/game.html\n")

    cfg = load_config(config_path)

    assert cfg["root"] == project.resolve()
    assert cfg["paths"]["source"] == (project / "src" / "my_game.txt").resolve()
    assert str(cfg["paths"]["output"]).endswith("game.html")
    assert cfg["paths"]["output"].is_absolute()
    assert cfg["paths"]["template"] == (project / "puzzlescript" / "standalone_inlined.txt").resolve()


@pytest.mark.unit
def test_load_config_resolves_log_file_against_config_dir(tmp_path, isolated_cwd):
    project = tmp_path / "proj"
    project.mkdir()
    config_path = project / "pzsdev.yaml"
    config_path.write_text("logging:\n  file: logs/pzsdev.log\n")

    cfg = load_config(config_path)

    assert cfg["logging"]["file"] == (project / "logs" / "pzsdev.log").resolve()


@pytest.mark.unit
def test_load_config_leaves_unset_log_file(isolated_cwd):
    assert load_config()["logging"]["file"] is None


@pytest.mark.unit
def test_load_config_empty_file_gives_defaults(tmp_path):
    config_path = tmp_path / "pzsdev.yaml"
    config_path.write_text("")

    cfg = load_config(config_path)

    assert cfg["server"]["port"] == 3000


@pytest.mark.unit
def test_load_config_missing_file_raises(tmp_path):
    with pytest.raises(ConfigError):
        load_config(str(tmp_path / "does-not-exist.yaml"))


@pytest.mark.unit
def test_load_config_invalid_yaml(tmp_path):
    config_path = tmp_path / "pzsdev.yaml"
    config_path.write_text("invalid: [unclosed")

    with pytest.raises(ConfigError):
        load_config(str(config_path))


@pytest.mark.unit
def test_load_config_requires_mapping(tmp_path):
    config_path = tmp_path / "pzsdev.yaml"
    config_path.write_text("- just\n- a list\n")

    with pytest.raises(ConfigError, match="YAML dictionary"):
        load_config(str(config_path))


@pytest.mark.unit
def test_get_config_value_dot_path(isolated_cwd):
    cfg = load_config()

    assert get_config_value(cfg, "server.port") == 3000
    assert get_config_value(cfg, "server.missing", "fallback") == "fallback"
    assert get_config_value(cfg, "paths.editor.deeper") is None
