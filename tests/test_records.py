"""
Unit tests for death record models and money helpers.
"""

import pytest

from deathlogger.models.records import (
    BagSlot,
    BagSnapshot,
    Currency,
    DeathRecord,
    EquippedSlot,
    Identity,
    InstanceContext,
    Inventory,
    Location,
    format_money,
    money_breakdown,
    round_coordinate,
)
from deathlogger.parser.events import DamageKind
from deathlogger.tracking.resolver import KillerAttribution, UNKNOWN_KILLER


class TestMoney:
    """Test copper decomposition and formatting."""

    def test_breakdown(self):
        assert money_breakdown(123456) == (12, 34, 56)

    def test_format(self):
        assert format_money(123456) == "12g 34s 56c"

    @pytest.mark.parametrize(
        "total, expected",
        [
            (0, "0g 0s 0c"),
            (99, "0g 0s 99c"),
            (100, "0g 1s 0c"),
            (10000, "1g 0s 0c"),
            (None, "0g 0s 0c"),
        ],
    )
    def test_format_edges(self, total, expected):
        assert format_money(total) == expected

    def test_currency_from_total(self):
        currency = Currency.from_total(123456)

        assert (currency.gold, currency.silver, currency.copper) == (12, 34, 56)
        assert currency.total == 123456
        assert currency.format() == "12g 34s 56c"


class TestCoordinates:
    """Test percent coordinate rounding."""

    def test_round_half_up(self):
        # 0.125 is exact in binary; round() would give 0.12
        assert round_coordinate(0.125) == pytest.approx(0.13)
        assert round_coordinate(12.346) == pytest.approx(12.35)
        assert round_coordinate(12.344) == pytest.approx(12.34)

    def test_none(self):
        assert round_coordinate(None) is None

    def test_from_map_position(self):
        location = Location.from_map_position("Orgrimmar", "Valley of Wisdom", 85, 0.39512, 0.80127)

        assert location.x == pytest.approx(39.51)
        assert location.y == pytest.approx(80.13)
        assert location.has_coordinates

    def test_missing_position(self):
        location = Location.from_map_position("Orgrimmar", None, None, None, None)

        assert location.x is None
        assert not location.has_coordinates


class TestDeathRecord:
    """Test the persisted entry layout."""

    def full_record(self) -> DeathRecord:
        return DeathRecord(
            recorded_at=1726450230.0,
            killer=KillerAttribution(
                source_name="Ulgrax the Devourer",
                detail="Brutal Crush",
                kind=DamageKind.SPELL_DAMAGE,
                spell_name="Brutal Crush",
                amount=52000,
                overkill=12000,
                timestamp=1726450229.5,
            ),
            identity=Identity(name="Thrall", realm="Draenor", level=80, class_name="SHAMAN", spec_id=263),
            location=Location(zone="Nerub-ar Palace", subzone="The Gilded Cradle", map_id=2292, x=45.12, y=60.5),
            currency=Currency.from_total(123456),
            inventory=Inventory(
                bags=(BagSnapshot(bag_id=0, slots=(BagSlot(slot=1, item_id=6948, stack_count=1, quality=1),)),),
                equipped=(EquippedSlot(slot=1, hyperlink="|Hitem:212345|h[Helm]|h"),),
            ),
            instance=InstanceContext(name="Nerub-ar Palace", difficulty_id=16, difficulty_name="Mythic", instance_id=2657),
        )

    def test_to_dict_layout(self):
        data = self.full_record().to_dict()

        assert data["at"] == 1726450230.0
        assert data["player"] == "Thrall"
        assert data["realm"] == "Draenor"
        assert data["class"] == "SHAMAN"
        assert data["specID"] == 263
        assert data["location"]["mapID"] == 2292
        assert data["killer"]["sourceName"] == "Ulgrax the Devourer"
        assert data["moneyCopper"] == 123456
        assert data["moneyGold"] == 12
        assert data["moneySilver"] == 34
        assert data["moneyCopperOnly"] == 56
        assert data["bags"][0]["slots"][0]["itemID"] == 6948
        assert data["equipped"][0]["hyperlink"] == "|Hitem:212345|h[Helm]|h"
        assert data["mapDifficultyID"] == 16
        assert data["instanceDifficulty"] == "Mythic"

    def test_from_dict_restores_record(self):
        original = self.full_record()

        assert DeathRecord.from_dict(original.to_dict()) == original

    def test_absent_fields_stay_absent(self):
        """Test that missing snapshots are None rather than zero or empty."""
        data = DeathRecord(recorded_at=5.0, killer=UNKNOWN_KILLER).to_dict()

        assert data["moneyCopper"] is None
        assert data["location"] is None
        assert data["bags"] is None

        restored = DeathRecord.from_dict(data)
        assert restored.currency is None
        assert restored.identity is None
        assert restored.inventory is None
        assert restored.instance is None

    def test_zero_money_is_not_absent(self):
        record = DeathRecord(recorded_at=5.0, killer=UNKNOWN_KILLER, currency=Currency.from_total(0))

        restored = DeathRecord.from_dict(record.to_dict())
        assert restored.currency is not None
        assert restored.currency.total == 0
