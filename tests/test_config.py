import pytest

from loot1004.config.loader import CONFIG_ENV, GameConfig, discover_config_path, load_config
from loot1004.exceptions import ConfigError


def test_embedded_defaults():
    cfg = load_config(env={})
    assert {k: d.target for k, d in cfg.difficulties.items()} == {"easy": 5000, "normal": 10000, "hard": 20000}
    assert cfg.default_difficulty == "normal"
    assert cfg.difficulty("hard").label == "Hard"
    assert cfg.difficulty("nightmare") is None
    assert cfg.starting_cards == {"heal": 2, "trap_disarm": 3, "map": 2, "multiplier_card": 1}
    assert cfg.max_health == 3
    assert cfg.notification_seconds == 3.0


def test_load_from_explicit_path(tmp_path):
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "difficulties:\n"
        "  short:\n"
        "    target: 300\n"
        "default_difficulty: short\n"
        "starting_cards:\n"
        "  map: 5\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.difficulty("short").target == 300
    assert cfg.difficulty("short").label == "Short"
    assert cfg.starting_cards == {"heal": 0, "trap_disarm": 0, "map": 5, "multiplier_card": 0}


def test_env_var_points_to_config(tmp_path):
    path = tmp_path / "env.yaml"
    path.write_text("difficulties:\n  only:\n    target: 42\n", encoding="utf-8")
    env = {CONFIG_ENV: str(path)}
    assert discover_config_path(env) == path.resolve()
    cfg = load_config(env=env)
    assert cfg.default_difficulty == "only"


def test_user_config_dir_is_used_when_present(tmp_path, monkeypatch):
    from loot1004.config import loader

    (tmp_path / "config.yaml").write_text("difficulties:\n  mine:\n    target: 7\n", encoding="utf-8")
    monkeypatch.setattr(loader, "user_config_dir", lambda app: str(tmp_path))
    assert discover_config_path({}) == tmp_path / "config.yaml"
    assert load_config(env={}).difficulty("mine").target == 7


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"difficulties": {}},
        {"difficulties": {"normal": {"target": 0}}},
        {"difficulties": {"normal": {"target": "lots"}}},
        {"difficulties": {"normal": {"target": 10}}, "starting_cards": {"score": 1}},
        {"difficulties": {"normal": {"target": 10}}, "starting_cards": {"heal": -1}},
        {"difficulties": {"normal": {"target": 10}}, "max_health": 0},
        {"difficulties": {"normal": {"target": 10}}, "colour": "blue"},
    ],
)
def test_schema_rejects_invalid_documents(raw):
    with pytest.raises(ConfigError):
        GameConfig.from_dict(raw)


def test_unknown_default_difficulty():
    with pytest.raises(ConfigError):
        GameConfig.from_dict({"difficulties": {"normal": {"target": 10}}, "default_difficulty": "hard"})


def test_malformed_yaml(tmp_path):
    path = tmp_path / "broken.yaml"
    path.write_text("difficulties: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_config(tmp_path / "nope.yaml")


def test_non_mapping_document(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)
