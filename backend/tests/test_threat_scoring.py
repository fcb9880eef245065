"""Tests for the additive threat scoring model (threat_scoring.py).

Most tests pass ``config={}`` so scoring runs on the built-in defaults and
does not depend on the YAML file on disk.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from mda.models.base import FormationTypeEnum, ShipTypeEnum, ThreatLevelEnum
from mda.modules import threat_scoring
from mda.modules.threat_scoring import (
    assess_all,
    assess_threat,
    load_scoring_config,
    reload_scoring_config,
    threat_level,
)
from mda.schemas.formation import ShipFormation
from mda.schemas.sighting import DetectedShip, Hotspot
from mda.utils.geo import destination_point

NOW = datetime(2026, 2, 1, 6, 0, 0, tzinfo=timezone.utc)
TAIPEI = Hotspot(name="Taipei", lat=25.03, lon=121.5, level="high")


def _make_ship(**overrides) -> DetectedShip:
    data = {
        "id": "X-1",
        "name": "Test Ship",
        "country": "FR",
        "type": ShipTypeEnum.UNKNOWN,
        "lat": 0.0,
        "lon": 0.0,
        "timestamp": NOW,
    }
    data.update(overrides)
    return DetectedShip(**data)


def _ship_near(hotspot: Hotspot, km: float, **overrides) -> DetectedShip:
    lat, lon = destination_point(hotspot.lat, hotspot.lon, 90.0, km)
    return _make_ship(lat=lat, lon=lon, **overrides)


def _formation(ftype: FormationTypeEnum, member_ids: list[str]) -> ShipFormation:
    return ShipFormation(
        id="FORM-CN-deadbeef",
        name="Liaoning Carrier Group",
        type=ftype,
        country="CN",
        member_ids=member_ids,
        center_lat=0.0,
        center_lon=0.0,
        radius_km=10.0,
    )


@pytest.fixture
def fresh_config_cache(monkeypatch):
    """Isolate tests that exercise the module-level YAML cache."""
    monkeypatch.setattr(threat_scoring, "_SCORING_CONFIG", None)
    yield


# ── Scenario & bounds ────────────────────────────────────────────────

class TestScenario:
    def test_carrier_near_hotspot_outranks_distant_patrol(self):
        carrier = _ship_near(TAIPEI, 40.0, id="CN-Liaoning", type="carrier", velocity=32.0)
        patrol = _ship_near(TAIPEI, 600.0, id="FR-P1", type="patrol", velocity=5.0)

        c = assess_threat(carrier, [TAIPEI], config={})
        p = assess_threat(patrol, [TAIPEI], config={})

        assert c.score > p.score
        # 30 type + 25 proximity + round(10 * 32 / 55) velocity
        assert c.score == 61
        assert c.level == ThreatLevelEnum.HIGH
        # 5 type + 0 proximity + round(10 * 5 / 55) velocity
        assert p.score == 6
        assert p.level == ThreatLevelEnum.LOW

    @pytest.mark.parametrize("ship_type", list(ShipTypeEnum))
    @pytest.mark.parametrize("km", [0.0, 49.0, 250.0, 800.0])
    def test_score_within_bounds(self, ship_type, km):
        ship = _ship_near(TAIPEI, km, type=ship_type, velocity=90.0, location="Taiwan Strait")
        result = assess_threat(ship, [TAIPEI], _formation(FormationTypeEnum.CARRIER_GROUP, ["X-1", "X-2"]), config={})
        assert 0 <= result.score <= 100

    def test_score_equals_sum_of_quoted_points(self):
        ship = _ship_near(TAIPEI, 320.0, type="destroyer", velocity=27.5, location="Taiwan Strait")
        result = assess_threat(ship, [TAIPEI], config={})
        quoted = sum(int(r.rsplit("(+", 1)[1].rstrip(")")) for r in result.reasoning)
        assert quoted == result.score

    def test_total_is_clamped_to_100(self):
        config = {
            "ship_type": {"budget": 60, "carrier": 60},
            "velocity": {"budget": 30, "cap_kmh": 10},
        }
        ship = _ship_near(TAIPEI, 1.0, country="CN", type="carrier", velocity=50.0, location="Taiwan Strait")
        result = assess_threat(ship, [TAIPEI], _formation(FormationTypeEnum.CARRIER_GROUP, ["X-1", "X-2"]), config=config)
        assert result.score == 100
        assert result.level == ThreatLevelEnum.EXTREME

    def test_zero_score_has_empty_reasoning(self):
        result = assess_threat(_make_ship(), [], config={"ship_type": {"unknown": 0}})
        assert result.score == 0
        assert result.reasoning == []
        assert result.level == ThreatLevelEnum.LOW


# ── Individual factors ───────────────────────────────────────────────

class TestShipTypeFactor:
    @pytest.mark.parametrize(
        "ship_type,points",
        [("carrier", 30), ("submarine", 28), ("cruiser", 22), ("destroyer", 20),
         ("amphibious", 18), ("frigate", 15), ("patrol", 5), ("unknown", 5)],
    )
    def test_table_lookup(self, ship_type, points):
        result = assess_threat(_make_ship(type=ship_type), [], config={})
        assert result.score == points
        assert result.reasoning == [f"Ship type {ship_type} (+{points})"]

    def test_unrecognized_type_gets_lowest_tier(self):
        ship = _make_ship(type="corvette")
        assert ship.type == ShipTypeEnum.UNKNOWN
        assert assess_threat(ship, [], config={}).score == 5

    def test_type_points_clamped_to_budget(self):
        result = assess_threat(_make_ship(type="carrier"), [], config={"ship_type": {"carrier": 45}})
        assert result.score == 30


class TestHotspotFactor:
    def test_empty_hotspots_gives_no_points(self):
        result = assess_threat(_make_ship(type="patrol"), [], config={})
        assert result.score == 5
        assert not any("hotspot" in r for r in result.reasoning)

    def test_full_points_inside_critical_radius(self):
        result = assess_threat(_ship_near(TAIPEI, 40.0, type="patrol"), [TAIPEI], config={})
        assert result.score == 5 + 25
        assert result.reasoning[1] == "40 km from hotspot Taipei (+25)"

    def test_linear_decay(self):
        # 25 * (500 - 320) / (500 - 50) = 10
        result = assess_threat(_ship_near(TAIPEI, 320.0, type="patrol"), [TAIPEI], config={})
        assert result.score == 5 + 10

    def test_zero_beyond_outer_radius(self):
        result = assess_threat(_ship_near(TAIPEI, 520.0, type="patrol"), [TAIPEI], config={})
        assert result.score == 5

    def test_nearest_hotspot_is_used(self):
        far = Hotspot(name="Far", lat=-40.0, lon=-60.0)
        result = assess_threat(_ship_near(TAIPEI, 10.0, type="patrol"), [far, TAIPEI], config={})
        assert "hotspot Taipei" in result.reasoning[1]


class TestRegionFactor:
    def test_region_for_own_country(self):
        ship = _make_ship(country="CN", location="Patrolling the South China Sea near the Spratlys")
        result = assess_threat(ship, [], config={})
        assert "Operating in high-tension region South China Sea (+25)" in result.reasoning

    def test_region_not_configured_for_country(self):
        ship = _make_ship(country="FR", location="South China Sea")
        result = assess_threat(ship, [], config={})
        assert not any("high-tension" in r for r in result.reasoning)

    def test_wildcard_region_applies_to_everyone(self):
        ship = _make_ship(country="FR", location="Transiting the Taiwan Strait")
        assert assess_threat(ship, [], config={}).score == 5 + 25

    def test_match_ignores_case_and_punctuation(self):
        ship = _make_ship(country="FR", location="off BAB-EL-MANDEB, heading north")
        assert assess_threat(ship, [], config={}).score == 5 + 25

    def test_partial_word_does_not_match(self):
        ship = _make_ship(country="US", location="Red Seaside Marina")
        assert assess_threat(ship, [], config={}).score == 5

    def test_independent_of_hotspot_distance(self):
        ship = _ship_near(TAIPEI, 2000.0, country="CN", location="East China Sea")
        result = assess_threat(ship, [TAIPEI], config={})
        assert result.score == 5 + 25

    def test_regions_argument_overrides_config(self):
        ship = _make_ship(country="FR", location="Gulf of Guinea")
        result = assess_threat(ship, [], config={}, regions={"FR": ["Gulf of Guinea"]})
        assert result.score == 5 + 25

    def test_no_location_no_region_points(self):
        assert assess_threat(_make_ship(country="CN"), [], config={}).score == 5


class TestVelocityFactor:
    @pytest.mark.parametrize("velocity,points", [(None, 0), (0.0, 0), (27.5, 5), (55.0, 10), (200.0, 10)])
    def test_proportional_up_to_cap(self, velocity, points):
        result = assess_threat(_make_ship(velocity=velocity), [], config={})
        assert result.score == 5 + points

    def test_reason_text(self):
        result = assess_threat(_make_ship(velocity=55.0), [], config={})
        assert result.reasoning[-1] == "Speed 55.0 km/h (+10)"


class TestFormationFactor:
    @pytest.mark.parametrize(
        "ftype,points",
        [(FormationTypeEnum.CARRIER_GROUP, 10), (FormationTypeEnum.NAVAL_TASK_FORCE, 10),
         (FormationTypeEnum.AMPHIBIOUS_TASK_FORCE, 8), (FormationTypeEnum.PATROL_GROUP, 6),
         (FormationTypeEnum.CONVOY, 5)],
    )
    def test_points_by_formation_type(self, ftype, points):
        formation = _formation(ftype, ["X-1", "X-2"])
        result = assess_threat(_make_ship(), [], formation, config={})
        assert result.score == 5 + points
        assert result.reasoning[-1].startswith(f"Member of {ftype.value} ")

    def test_no_formation_no_points(self):
        assert assess_threat(_make_ship(), [], None, config={}).score == 5


class TestReasoningOrder:
    def test_factors_listed_in_table_order(self):
        ship = _ship_near(
            TAIPEI, 20.0, country="CN", type="destroyer", velocity=30.0, location="Taiwan Strait",
        )
        formation = _formation(FormationTypeEnum.PATROL_GROUP, ["X-1", "X-2", "X-3"])
        result = assess_threat(ship, [TAIPEI], formation, config={})
        prefixes = ["Ship type", "20 km from hotspot", "Operating in", "Speed", "Member of"]
        assert len(result.reasoning) == len(prefixes)
        for reason, prefix in zip(result.reasoning, prefixes):
            assert reason.startswith(prefix)


# ── Levels ───────────────────────────────────────────────────────────

class TestThreatLevel:
    @pytest.mark.parametrize(
        "score,level",
        [(100, ThreatLevelEnum.EXTREME), (75, ThreatLevelEnum.EXTREME),
         (74, ThreatLevelEnum.HIGH), (50, ThreatLevelEnum.HIGH),
         (49, ThreatLevelEnum.MEDIUM), (25, ThreatLevelEnum.MEDIUM),
         (24, ThreatLevelEnum.LOW), (0, ThreatLevelEnum.LOW)],
    )
    def test_band_boundaries(self, score, level):
        assert threat_level(score, config={}) == level

    def test_custom_bands(self):
        config = {"score_bands": {"extreme": 90, "high": 60, "medium": 30}}
        assert threat_level(80, config=config) == ThreatLevelEnum.HIGH


# ── Batch scoring ────────────────────────────────────────────────────

class TestAssessAll:
    def test_membership_resolved_by_vessel_id(self):
        ships = [_make_ship(id="A"), _make_ship(id="B"), _make_ship(id="C")]
        formation = _formation(FormationTypeEnum.CONVOY, ["A", "B"])
        results = assess_all(ships, [], [formation], config={})
        assert [r.vessel_id for r in results] == ["A", "B", "C"]
        assert [r.score for r in results] == [10, 10, 5]

    def test_no_formations(self):
        results = assess_all([_make_ship(id="A")], [], config={})
        assert results[0].score == 5


# ── Config loading ───────────────────────────────────────────────────

class TestScoringConfig:
    def test_shipped_yaml_has_all_sections(self, fresh_config_cache):
        config = load_scoring_config()
        for section in threat_scoring._EXPECTED_SECTIONS:
            assert section in config
        assert "proximity_alerts" in config

    def test_shipped_yaml_matches_defaults(self, fresh_config_cache):
        config = load_scoring_config()
        ship = _ship_near(TAIPEI, 40.0, type="carrier", velocity=32.0)
        assert assess_threat(ship, [TAIPEI], config=config).score == assess_threat(ship, [TAIPEI], config={}).score

    def test_missing_file_falls_back_to_defaults(self, fresh_config_cache, monkeypatch, tmp_path):
        monkeypatch.setattr(threat_scoring.settings, "THREAT_SCORING_CONFIG", str(tmp_path / "missing.yaml"))
        assert reload_scoring_config() == {}
        assert assess_threat(_make_ship(type="carrier"), []).score == 30

    def test_reload_picks_up_edits(self, fresh_config_cache, monkeypatch, tmp_path):
        path = tmp_path / "scoring.yaml"
        path.write_text("ship_type:\n  carrier: 12\n", encoding="utf-8")
        monkeypatch.setattr(threat_scoring.settings, "THREAT_SCORING_CONFIG", str(path))
        assert reload_scoring_config()["ship_type"]["carrier"] == 12
        assert assess_threat(_make_ship(type="carrier"), []).score == 12

        path.write_text("ship_type:\n  carrier: 25\n", encoding="utf-8")
        assert load_scoring_config()["ship_type"]["carrier"] == 12
        assert reload_scoring_config()["ship_type"]["carrier"] == 25
