from lockerhub.config.settings import get_logging_config, get_settings


def test_packaged_defaults():
    get_settings.cache_clear()
    s = get_settings()

    assert s.map.padding_factor == 2.5
    assert s.map.min_delta == 0.05
    assert (s.map.default_center.lat, s.map.default_center.lon) == (33.7490, -84.3880)
    assert (s.map.metro_delta.latitude, s.map.metro_delta.longitude) == (0.0922, 0.0421)
    assert s.booking.max_rental_hours == 10
    assert s.booking.cancel_cutoff_minutes == 60
    assert s.search.radius_km == 40


def test_env_overrides(monkeypatch):
    monkeypatch.setenv("LOCKERHUB_ENV", "Production")
    monkeypatch.setenv("LOCKERHUB_API_BASE_URL", "https://lockers.example.com/api")
    monkeypatch.setenv("LOCKERHUB_SESSION_PATH", "/tmp/lockerhub-session.json")
    get_settings.cache_clear()
    try:
        s = get_settings()
        assert s.app.environment == "production"
        assert s.app.is_development is False
        assert s.api.base_url == "https://lockers.example.com/api"
        assert s.session.path == "/tmp/lockerhub-session.json"
    finally:
        get_settings.cache_clear()


def test_external_config_file(monkeypatch, tmp_path):
    path = tmp_path / "lockerhub.yaml"
    path.write_text("search:\n  radius_km: 12\napp:\n  environment: production\n", encoding="utf-8")
    monkeypatch.setenv("LOCKERHUB_CONFIG_PATH", str(path))
    get_settings.cache_clear()
    try:
        s = get_settings()
        assert s.search.radius_km == 12
        assert s.map.padding_factor == 2.5
    finally:
        get_settings.cache_clear()


def test_logging_config_quiets_http_libraries():
    cfg = get_logging_config()
    assert cfg["loggers"]["httpx"]["level"] == "WARNING"
