from kube_builder.settings import get_settings


def test_defaults():
    settings = get_settings()

    assert settings.HISTORY_LIMIT_FALLBACK == 10
    assert settings.DEPLOY_MAX_TIME_FALLBACK == 600


def test_env_override(monkeypatch, builder):
    monkeypatch.setenv("KUBE_BUILDER_HISTORY_LIMIT_FALLBACK", "4")
    monkeypatch.setenv("KUBE_BUILDER_DEPLOY_MAX_TIME_FALLBACK", "900")
    get_settings.cache_clear()

    builder.set_history_limit(0).set_deploy_max_time(-1)

    assert builder.deployment.spec.revision_history_limit == 4
    assert builder.deployment.spec.progress_deadline_seconds == 900


def test_settings_are_cached():
    assert get_settings() is get_settings()
