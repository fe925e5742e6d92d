"""
Pytest configuration and shared fixtures for the test suite.
"""

import pytest
from pathlib import Path

import sys

sys.path.insert(0, str(Path(__file__).parent.parent))

from deathlogger.config import wow_data
from deathlogger.parser.events import DamageEvent, DamageKind

SUBJECT_GUID = "Player-1084-0A5F3B2C"
OTHER_GUID = "Player-1084-0B11C0DE"


class FakeClock:
    """Manually advanced clock."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def advance(self, seconds: float):
        self.now += seconds

    def __call__(self) -> float:
        return self.now


def make_damage(
    timestamp,
    kind=DamageKind.SPELL_DAMAGE,
    source_name="Ulgrax the Devourer",
    cause="Brutal Crush",
    amount=1000,
    overkill=None,
    target_id=SUBJECT_GUID,
    **kwargs,
):
    """Build a damage event aimed at the tracked character by default."""
    return DamageEvent(
        timestamp=timestamp,
        kind=kind,
        source_name=source_name,
        spell_or_cause_name=cause,
        amount=amount,
        overkill=overkill,
        target_id=target_id,
        **kwargs,
    )


@pytest.fixture
def clock():
    """Fake clock starting at t=1000."""
    return FakeClock()


@pytest.fixture
def subject_guid():
    return SUBJECT_GUID


@pytest.fixture
def state_path(tmp_path):
    """Path for a state file that does not exist yet."""
    return str(tmp_path / "state" / "state.json")


@pytest.fixture
def restore_wow_data():
    """Undo config overrides written into the wow_data tables."""
    difficulties = dict(wow_data.DIFFICULTY_NAMES)
    specs = dict(wow_data.ALL_SPECS)
    yield
    wow_data.DIFFICULTY_NAMES.clear()
    wow_data.DIFFICULTY_NAMES.update(difficulties)
    wow_data.ALL_SPECS.clear()
    wow_data.ALL_SPECS.update(specs)


# Advanced Combat Logging unit info: GUID, owner, health, stats, power, x, y, uiMapID, facing, level
SUBJECT_UNIT_INFO = "Player-1084-0A5F3B2C,0000000000000000,38000,850000,9500,0,42857,0,0,0,1,0,0,0,-2242.65,1384.84,2292,1.5708,80"
OTHER_UNIT_INFO = "Player-1084-0B11C0DE,0000000000000000,610000,790000,0,31000,18000,0,0,0,0,250000,250000,0,-2240.10,1390.02,2292,4.7124,80"

COMBATANT_INFO_LINE = (
    "9/15/2025 21:30:20.000-4  COMBATANT_INFO,Player-1084-0A5F3B2C,1,"
    "1,2,3,4,5,6,7,8,9,10,11,12,13,14,15,16,17,18,19,20,21,"
    "263,[(1,2,3)],(0,0,0,0),"
    "[(212345,639,(),(),()),(0,0,(),(),()),(212347,636,(),(),())],[]"
)


@pytest.fixture
def sample_log_lines():
    """Sample combat log with one death of the tracked character."""
    return [
        "9/15/2025 21:30:19.000-4  COMBAT_LOG_VERSION,22,ADVANCED_LOG_ENABLED,1,BUILD_VERSION,11.2.0,PROJECT_ID,1",
        '9/15/2025 21:30:19.100-4  ZONE_CHANGE,2657,"Nerub-ar Palace",16',
        '9/15/2025 21:30:19.200-4  MAP_CHANGE,2292,"The Gilded Cradle",0.0,0.0,0.0,0.0',
        COMBATANT_INFO_LINE,
        '9/15/2025 21:30:21.000-4  ENCOUNTER_START,2902,"Ulgrax the Devourer",16,20,2657',
        # Old hit that falls out of the window before the death
        '9/15/2025 21:30:22.000-4  SWING_DAMAGE,Creature-0-3019-2657-1-215657-0000,"Ulgrax the Devourer",0xa48,0x0,'
        'Player-1084-0A5F3B2C,"Thrall-Draenor-EU",0x511,0x0,' + SUBJECT_UNIT_INFO + ",1500,1650,-1,1,0,0,0,nil,nil,nil,ST",
        # Damage to someone else
        '9/15/2025 21:30:29.000-4  SPELL_DAMAGE,Creature-0-3019-2657-1-215657-0000,"Ulgrax the Devourer",0xa48,0x0,'
        'Player-1084-0B11C0DE,"Jaina-Draenor-EU",0x512,0x0,434697,"Brutal Crush",0x1,' + OTHER_UNIT_INFO
        + ",52000,52000,9000,1,0,0,0,nil,nil,nil,ST",
        '9/15/2025 21:30:29.500-4  SPELL_DAMAGE,Creature-0-3019-2657-1-215657-0000,"Ulgrax the Devourer",0xa48,0x0,'
        'Player-1084-0A5F3B2C,"Thrall-Draenor-EU",0x511,0x0,434697,"Brutal Crush",0x1,' + SUBJECT_UNIT_INFO
        + ",52000,52000,12000,1,0,0,0,nil,nil,nil,ST",
        '9/15/2025 21:30:29.800-4  SPELL_PERIODIC_DAMAGE,Creature-0-3019-2657-1-215657-0000,"Ulgrax the Devourer",0xa48,0x0,'
        'Player-1084-0A5F3B2C,"Thrall-Draenor-EU",0x511,0x0,435138,"Digestive Acid",0x8,' + SUBJECT_UNIT_INFO
        + ",3000,3000,-1,8,0,0,0,nil,nil,nil,ST",
        "9/15/2025 21:30:30.000-4  UNIT_DIED,0000000000000000,nil,0x80000000,0x80000000,"
        'Player-1084-0A5F3B2C,"Thrall-Draenor-EU",0x511,0x0,0',
        '9/15/2025 21:30:31.000-4  ENCOUNTER_END,2902,"Ulgrax the Devourer",16,20,0,180000',
    ]
