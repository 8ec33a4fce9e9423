import json

from storage.config import AppConfig, load_config, save_config, update_config


def test_missing_file_gives_defaults(tmp_path):
    cfg = load_config(tmp_path / "config.json")
    assert cfg == AppConfig()
    assert cfg.sound_enabled and not cfg.notifications_enabled
    assert cfg.last_view == "day"


def test_save_and_reload(tmp_path):
    path = tmp_path / "nested" / "config.json"
    save_config(AppConfig(notifications_enabled=True, sound_enabled=False, last_view="week"), path)
    assert load_config(path) == AppConfig(True, False, "week")
    assert not path.with_suffix(".tmp").exists()


def test_invalid_values_fall_back(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"last_view": "month", "sound_enabled": 0}), encoding="utf-8")
    cfg = load_config(path)
    assert cfg.last_view == "day"
    assert cfg.sound_enabled is False

    path.write_text("{broken", encoding="utf-8")
    assert load_config(path) == AppConfig()


def test_update_ignores_unknown_keys(tmp_path):
    path = tmp_path / "config.json"
    cfg = update_config(path, last_view="history", colour="red")
    assert cfg.last_view == "history"
    assert "colour" not in json.loads(path.read_text(encoding="utf-8"))
