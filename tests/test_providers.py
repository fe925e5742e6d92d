"""
Unit tests for snapshot providers.
"""

from unittest.mock import Mock

import pytest

from deathlogger.models.records import EquippedSlot, Identity, Location
from deathlogger.parser.events import (
    CombatantSnapshot,
    DeathNotice,
    EncounterChange,
    MapChange,
    ZoneChange,
)
from deathlogger.providers.base import ChainedProviders, SnapshotProviders
from deathlogger.providers.combat_log import CombatLogContext, parse_character_name
from deathlogger.providers.static import StaticProviders

from .conftest import OTHER_GUID, SUBJECT_GUID


class TestParseCharacterName:
    """Test Name-Realm-Region splitting."""

    def test_full_name(self):
        assert parse_character_name("Thrall-Draenor-EU") == {"name": "Thrall", "server": "Draenor", "region": "EU"}

    def test_plain_name(self):
        assert parse_character_name("Thrall") == {"name": "Thrall", "server": None, "region": None}

    def test_empty(self):
        assert parse_character_name(None)["name"] is None


class TestSnapshotProviders:
    """Test the base and chained providers."""

    def test_base_reports_nothing(self):
        providers = SnapshotProviders()

        assert providers.identity() is None
        assert providers.location() is None
        assert providers.inventory() is None
        assert providers.currency() is None
        assert providers.instance() is None

    def test_chain_returns_first_answer(self):
        first = StaticProviders(location=Location(zone="Orgrimmar"))
        second = StaticProviders(location=Location(zone="Stormwind"), money=500)

        chained = ChainedProviders(first, second)

        assert chained.location().zone == "Orgrimmar"
        assert chained.currency() == 500
        assert chained.identity() is None

    def test_chain_fills_missing_fields(self):
        """Test that later providers fill fields the first one lacks."""
        context = CombatLogContext(SUBJECT_GUID, subject_name="Thrall-Draenor-EU")
        context.observe(ZoneChange(timestamp=1.0, instance_id=2657, zone_name="Nerub-ar Palace", difficulty_id=16))
        static = StaticProviders.from_config(
            {
                "identity": {"name": "Someone", "level": 80, "class": "SHAMAN"},
                "location": {"zone": "Orgrimmar", "x": 45.5, "y": 60.25},
            }
        )

        chained = ChainedProviders(context, static)

        assert chained.identity() == Identity(name="Thrall", realm="Draenor", level=80, class_name="SHAMAN")
        location = chained.location()
        assert location.zone == "Nerub-ar Palace"
        assert location.x == 45.5
        assert location.y == 60.25

    def test_failing_provider_is_skipped(self):
        broken = Mock(spec=SnapshotProviders)
        broken.location.side_effect = RuntimeError("addon not loaded")

        chained = ChainedProviders(broken, StaticProviders(location=Location(zone="Orgrimmar")))

        assert chained.location() == Location(zone="Orgrimmar")


class TestStaticProviders:
    """Test providers built from config blocks."""

    def test_from_config(self):
        providers = StaticProviders.from_config(
            {
                "identity": {"name": "Thrall", "realm": "Draenor", "level": 80, "spec_id": 263},
                "location": {"zone": "Orgrimmar", "subzone": "Valley of Wisdom", "x": 39.512, "y": 80.127},
                "money": "123456",
            }
        )

        assert providers.identity() == Identity(
            name="Thrall", realm="Draenor", level=80, class_name="SHAMAN", spec_id=263
        )
        assert providers.location().x == pytest.approx(39.51)
        assert providers.location().y == pytest.approx(80.13)
        assert providers.currency() == 123456
        assert providers.inventory() is None

    def test_explicit_class_wins(self):
        providers = StaticProviders.from_config({"identity": {"name": "Thrall", "class": "WARRIOR", "spec_id": 263}})

        assert providers.identity().class_name == "WARRIOR"

    def test_bad_money_is_ignored(self):
        assert StaticProviders.from_config({"money": "a lot"}).currency() is None

    def test_empty_config(self):
        providers = StaticProviders.from_config({})

        assert providers.identity() is None
        assert providers.location() is None


class TestCombatLogContext:
    """Test context tracking from combat log events."""

    def test_nothing_seen(self):
        context = CombatLogContext(SUBJECT_GUID)

        assert context.identity() is None
        assert context.location() is None
        assert context.inventory() is None
        assert context.instance() is None
        assert context.currency() is None

    def test_zone_and_map(self):
        context = CombatLogContext(SUBJECT_GUID)
        context.observe(ZoneChange(timestamp=1.0, instance_id=2657, zone_name="Nerub-ar Palace", difficulty_id=16))
        context.observe(MapChange(timestamp=2.0, map_id=2292, map_name="The Gilded Cradle"))

        assert context.location() == Location(zone="Nerub-ar Palace", subzone="The Gilded Cradle", map_id=2292)

        instance = context.instance()
        assert instance.name == "Nerub-ar Palace"
        assert instance.difficulty_id == 16
        assert instance.difficulty_name == "Mythic"
        assert instance.instance_id == 2657

    def test_zone_change_resets_map(self):
        context = CombatLogContext(SUBJECT_GUID)
        context.observe(MapChange(timestamp=1.0, map_id=2292, map_name="The Gilded Cradle"))
        context.observe(ZoneChange(timestamp=2.0, instance_id=2552, zone_name="Dornogal", difficulty_id=0))

        assert context.location() == Location(zone="Dornogal")
        # Open world has no difficulty
        assert context.instance() is None

    def test_encounter_start_sets_difficulty(self):
        context = CombatLogContext(SUBJECT_GUID)
        context.observe(ZoneChange(timestamp=1.0, instance_id=2657, zone_name="Nerub-ar Palace", difficulty_id=0))
        context.observe(
            EncounterChange(
                timestamp=2.0, started=True, encounter_id=2902,
                encounter_name="Ulgrax the Devourer", difficulty_id=15, instance_id=2657,
            )
        )

        assert context.instance().difficulty_name == "Heroic"

    def test_combatant_info_for_subject_only(self):
        context = CombatLogContext(SUBJECT_GUID, subject_name="Thrall-Draenor-EU")
        context.observe(CombatantSnapshot(timestamp=1.0, unit_id=OTHER_GUID, spec_id=62, equipped_item_ids=((1, 1),)))
        context.observe(
            CombatantSnapshot(timestamp=1.0, unit_id=SUBJECT_GUID, spec_id=263, equipped_item_ids=((1, 212345),))
        )

        identity = context.identity()
        assert identity.name == "Thrall"
        assert identity.realm == "Draenor"
        assert identity.spec_id == 263
        assert identity.class_name == "SHAMAN"

        inventory = context.inventory()
        assert inventory.bags is None
        assert inventory.equipped == (EquippedSlot(slot=1, item_id=212345),)

    def test_name_learned_from_death(self):
        context = CombatLogContext(SUBJECT_GUID)
        context.observe(DeathNotice(timestamp=1.0, unit_id=SUBJECT_GUID, unit_name="Thrall-Draenor-EU"))

        assert context.identity().name == "Thrall"
        assert context.identity().realm == "Draenor"
