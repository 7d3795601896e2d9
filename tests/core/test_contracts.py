import pytest

from pageprobe.core.contracts import ClientRect, ComputedStyle, ProbeConfig, WaitOptions


def test_wait_options_defaults() -> None:
    options = WaitOptions()

    assert options.timeout_ms == 30_000
    assert options.stability_ms == 300
    assert options.polling_ms == 10
    assert options.throw_on_timeout is True
    assert options.wrap_predicate_execution_inside_try_catch is False
    assert options.verbose is False


def test_merge_ignores_none_and_keeps_receiver() -> None:
    base = WaitOptions()

    merged = base.merge(timeout_ms=100, stability_ms=None, verbose=True)

    assert merged.timeout_ms == 100
    assert merged.stability_ms == 300
    assert merged.verbose is True
    assert base.timeout_ms == 30_000


def test_merge_rejects_unknown_option() -> None:
    with pytest.raises(TypeError):
        WaitOptions().merge(retries=3)


def test_client_rect_edges() -> None:
    rect = ClientRect.from_dict({"top": 10, "left": 5, "width": 20, "height": None})

    assert rect.right == 25
    assert rect.bottom == 10
    assert rect.is_empty is True


def test_transparency_parses_opacity() -> None:
    assert ComputedStyle(opacity="0").is_transparent is True
    assert ComputedStyle(opacity="0.01").is_transparent is False
    assert ComputedStyle(opacity="").is_transparent is False


def test_probe_config_from_env(monkeypatch) -> None:
    monkeypatch.setenv("PAGEPROBE_TIMEOUT_MS", "5000")
    monkeypatch.setenv("PAGEPROBE_STABILITY_MS", "0")
    monkeypatch.setenv("PAGEPROBE_VERBOSE", "yes")
    monkeypatch.setenv("PAGEPROBE_HEADLESS", "false")
    monkeypatch.delenv("PAGEPROBE_POLLING_MS", raising=False)

    config = ProbeConfig.from_env()

    assert config.default_wait.timeout_ms == 5000
    assert config.default_wait.stability_ms == 0
    assert config.default_wait.polling_ms == 10
    assert config.default_wait.verbose is True
    assert config.headless is False
