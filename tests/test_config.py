import json

from optachat_client.config import DEFAULT_SERVER_URL, ConfigManager, get_config_manager


def test_defaults_without_file(tmp_path):
    manager = ConfigManager(tmp_path)
    config = manager.load()
    assert config.server_url == DEFAULT_SERVER_URL
    assert config.timeout == 60.0
    assert not manager.config_file.exists()


def test_set_server_url_persists(tmp_path):
    manager = ConfigManager(tmp_path / "nested")
    manager.set_server_url("http://example.test:5000/")

    data = json.loads(manager.config_file.read_text(encoding="utf-8"))
    assert data["server_url"] == "http://example.test:5000"
    assert ConfigManager(tmp_path / "nested").load().server_url == "http://example.test:5000"


def test_set_timeout(tmp_path):
    manager = ConfigManager(tmp_path)
    manager.set_timeout(5)
    assert ConfigManager(tmp_path).load().timeout == 5.0


def test_corrupt_file_falls_back_to_defaults(tmp_path):
    (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
    assert ConfigManager(tmp_path).load().server_url == DEFAULT_SERVER_URL

    (tmp_path / "config.json").write_text('{"timeout": "soon"}', encoding="utf-8")
    assert ConfigManager(tmp_path).load().server_url == DEFAULT_SERVER_URL


def test_global_manager(tmp_path):
    manager = get_config_manager(tmp_path)
    assert get_config_manager() is manager
    assert manager.config_dir == tmp_path
