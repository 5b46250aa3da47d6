from cti_extractor.config import Config, get_config


def test_packaged_defaults():
    config = Config()

    assert config.get('model.name') == 'gemini-3-pro-preview'
    assert config.get('model.thinking_budget') == 4000
    assert config.defang_by_default() is True
    assert config.get('missing.key', 'fallback') == 'fallback'


def test_custom_file_merges_over_defaults(tmp_path):
    custom = tmp_path / 'custom.yaml'
    custom.write_text("display:\n  defang: false\nmodel:\n  timeout: 30\n", encoding='utf-8')

    config = Config(str(custom))

    assert config.defang_by_default() is False
    assert config.get('display.view') == 'dashboard'
    assert config.get_model_settings()['timeout'] == 30
    assert config.get_model_settings()['name'] == 'gemini-3-pro-preview'


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv('CTI_EXTRACT_MODEL', 'gemini-flash')
    monkeypatch.setenv('CTI_EXTRACT_TIMEOUT', '15')
    monkeypatch.setenv('CTI_EXTRACT_LOG_LEVEL', 'debug')

    config = Config()

    assert config.get('model.name') == 'gemini-flash'
    assert config.get('model.timeout') == 15.0
    assert config.get_log_level() == 'DEBUG'


def test_configuration_never_carries_credentials():
    settings = Config().get_model_settings()
    assert not any('key' in name for name in settings)


def test_get_config_reloads_for_explicit_path(tmp_path):
    custom = tmp_path / 'custom.yaml'
    custom.write_text("display:\n  view: json\n", encoding='utf-8')

    assert get_config(str(custom)).get('display.view') == 'json'
    assert get_config() is get_config()


def test_invalid_environment_values_fall_back(monkeypatch):
    monkeypatch.setenv('CTI_EXTRACT_TIMEOUT', 'soon')
    monkeypatch.setenv('CTI_EXTRACT_LOG_LEVEL', 'loud')

    config = Config()

    assert config.get('model.timeout') == 120
    assert config.get_log_level() == 'WARNING'


def test_empty_environment_values_are_ignored(monkeypatch):
    monkeypatch.setenv('CTI_EXTRACT_MODEL', '')

    assert Config().get('model.name') == 'gemini-3-pro-preview'
