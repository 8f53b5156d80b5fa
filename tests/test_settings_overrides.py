from __future__ import annotations

import pytest

from fleetgeo.config.overrides import apply_settings_overrides, parse_override_pairs
from fleetgeo.config.settings import get_settings


@pytest.fixture
def fresh_settings(monkeypatch):
    # get_settings() is lru_cached; clear around each test so env changes take effect.
    monkeypatch.delenv("FLEETGEO_CONFIG_PATH", raising=False)
    monkeypatch.delenv("FLEETGEO_LOG_LEVEL", raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_packaged_defaults_load(fresh_settings):
    settings = get_settings()
    assert settings.app.name == "FleetGeo"
    assert settings.search.nearest_limit == 10
    assert settings.motion.average_speed_kmh == 36.0
    assert settings.grid.heatmap_cell_deg == 0.01


def test_log_level_env_override(fresh_settings, monkeypatch):
    monkeypatch.setenv("FLEETGEO_LOG_LEVEL", "DEBUG")
    assert get_settings().app.log_level == "DEBUG"


def test_external_config_file(fresh_settings, monkeypatch, tmp_path):
    # FLEETGEO_CONFIG_PATH replaces the packaged YAML entirely.
    cfg = tmp_path / "fleetgeo.yaml"
    cfg.write_text("search:\n  nearest_limit: 3\nmotion:\n  average_speed_kmh: 25\n", encoding="utf-8")
    monkeypatch.setenv("FLEETGEO_CONFIG_PATH", str(cfg))

    settings = get_settings()
    assert settings.search.nearest_limit == 3
    assert settings.motion.average_speed_kmh == 25
    # Sections missing from the file fall back to model defaults.
    assert settings.accuracy.high_m == 10


def test_apply_settings_overrides_returns_same_object_when_none(fresh_settings):
    settings = get_settings()
    assert apply_settings_overrides(settings, None) is settings


def test_apply_settings_overrides_changes_allowed_knobs_without_mutating_base(fresh_settings):
    settings = get_settings()
    out = apply_settings_overrides(settings, {"motion": {"average_speed_kmh": 50}})

    assert out.motion.average_speed_kmh == 50
    assert settings.motion.average_speed_kmh == 36.0


def test_apply_settings_overrides_rejects_disallowed_keys_with_clear_path(fresh_settings):
    with pytest.raises(ValueError, match=r"app\.name"):
        apply_settings_overrides(get_settings(), {"app": {"name": "other"}})


def test_apply_settings_overrides_rejects_wrong_shapes(fresh_settings):
    with pytest.raises(ValueError, match=r"settings override key 'app' must be a mapping"):
        apply_settings_overrides(get_settings(), {"app": 1})


def test_apply_settings_overrides_revalidates_ranges(fresh_settings):
    # Merged payload goes back through pydantic, so field bounds still apply.
    with pytest.raises(ValueError):
        apply_settings_overrides(get_settings(), {"search": {"nearest_limit": 0}})


def test_parse_override_pairs_builds_nested_typed_mapping():
    assert parse_override_pairs(["motion.average_speed_kmh=40", "grid.heatmap_cell_deg=0.05"]) == {
        "motion": {"average_speed_kmh": 40},
        "grid": {"heatmap_cell_deg": 0.05},
    }
    with pytest.raises(ValueError, match="KEY=VALUE"):
        parse_override_pairs(["motion.average_speed_kmh"])
