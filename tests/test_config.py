from logroute.config import RouterConfig


def test_router_config_defaults():
    config = RouterConfig()
    assert config.level == "debug"
    assert config.namespaces == "*"
    assert config.buffer_size == 500
    assert config.capture_stack == "never"
    assert config.print_to_native is True
    assert config.auto_install is False


def test_router_config_from_env(monkeypatch):
    monkeypatch.setenv("LOGROUTE_LEVEL", "WARN")
    monkeypatch.setenv("LOGROUTE_NAMESPACES", "app:*,-app:verbose")
    monkeypatch.setenv("LOGROUTE_COLORS", "0")
    monkeypatch.setenv("LOGROUTE_BUFFER", "50")
    monkeypatch.setenv("LOGROUTE_CAPTURE_STACK", "error")

    config = RouterConfig.from_env()
    assert config.level == "warn"
    assert config.namespaces == "app:*,-app:verbose"
    assert config.enable_colors is False
    assert config.buffer_size == 50
    assert config.capture_stack == "on-error"


def test_invalid_env_values_are_ignored(monkeypatch):
    monkeypatch.setenv("LOGROUTE_LEVEL", "verbose")
    monkeypatch.setenv("LOGROUTE_BUFFER", "lots")
    monkeypatch.setenv("LOGROUTE_CAPTURE_STACK", "sometimes")

    config = RouterConfig.from_env()
    assert config.level == "debug"
    assert config.buffer_size == 500
    assert config.capture_stack == "never"


def test_apply_overrides_validates():
    config = RouterConfig().apply_overrides(
        {
            "level": "nope",
            "buffer_size": 0,
            "show_time": "yes",
            "show_icons": False,
            "capture_stack": True,
            "guard_interval": -1,
        }
    )
    assert config.level == "debug"
    assert config.buffer_size == 500
    assert config.show_time is True
    assert config.show_icons is False
    assert config.capture_stack == "always"
    assert config.guard_interval == 2.0


def test_copy_is_independent():
    config = RouterConfig()
    clone = config.copy()
    clone.level = "error"
    assert config.level == "debug"


def test_validated_replaces_invalid_fields():
    config = RouterConfig(level="bogus", buffer_size=-3, guard_interval=0, show_time=False)
    checked = config.validated()
    assert checked is not config
    assert checked.level == "debug"
    assert checked.buffer_size == 500
    assert checked.guard_interval == 2.0
    assert checked.show_time is False
    assert config.level == "bogus"
