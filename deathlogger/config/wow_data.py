"""
World of Warcraft lookup tables for describing where and as whom a character died.

Difficulty and spec names can be extended at runtime from the YAML
configuration (see ``ConfigLoader.apply_config``).
"""

from typing import Dict, Optional


# Instance difficulties logged by ZONE_CHANGE and ENCOUNTER_START.
# Open world is difficulty 0 and never looked up.
DIFFICULTY_NAMES: Dict[int, str] = {
    1: "Normal",
    2: "Heroic",
    8: "Mythic Keystone",
    11: "Heroic Scenario",
    12: "Normal Scenario",
    14: "Normal",
    15: "Heroic",
    16: "Mythic",
    17: "Looking For Raid",
    23: "Mythic",
    24: "Timewalking",
    33: "Timewalking",
    208: "Delves",
}


# Specializations per class token, as COMBATANT_INFO reports them
CLASS_SPECS: Dict[str, Dict[int, str]] = {
    "DEATHKNIGHT": {250: "Blood", 251: "Frost", 252: "Unholy"},
    "DEMONHUNTER": {577: "Havoc", 581: "Vengeance"},
    "DRUID": {102: "Balance", 103: "Feral", 104: "Guardian", 105: "Restoration"},
    "EVOKER": {1467: "Devastation", 1468: "Preservation", 1473: "Augmentation"},
    "HUNTER": {253: "Beast Mastery", 254: "Marksmanship", 255: "Survival"},
    "MAGE": {62: "Arcane", 63: "Fire", 64: "Frost"},
    "MONK": {268: "Brewmaster", 269: "Windwalker", 270: "Mistweaver"},
    "PALADIN": {65: "Holy", 66: "Protection", 70: "Retribution"},
    "PRIEST": {256: "Discipline", 257: "Holy", 258: "Shadow"},
    "ROGUE": {259: "Assassination", 260: "Outlaw", 261: "Subtlety"},
    "SHAMAN": {262: "Elemental", 263: "Enhancement", 264: "Restoration"},
    "WARLOCK": {265: "Affliction", 266: "Demonology", 267: "Destruction"},
    "WARRIOR": {71: "Arms", 72: "Fury", 73: "Protection"},
}

# Flattened views; ALL_SPECS also receives custom names from config
ALL_SPECS: Dict[int, str] = {
    spec_id: name for specs in CLASS_SPECS.values() for spec_id, name in specs.items()
}
SPEC_CLASSES: Dict[int, str] = {
    spec_id: class_token for class_token, specs in CLASS_SPECS.items() for spec_id in specs
}


def get_difficulty_name(difficulty_id: int) -> str:
    """
    Get the human-readable name for a difficulty ID.

    Args:
        difficulty_id: WoW difficulty ID from combat log

    Returns:
        Human-readable difficulty name
    """
    return DIFFICULTY_NAMES.get(difficulty_id, f"Unknown ({difficulty_id})")


def get_spec_name(spec_id: int) -> str:
    return ALL_SPECS.get(spec_id, f"Unknown Spec ({spec_id})")


def get_spec_class(spec_id: Optional[int]) -> Optional[str]:
    """Class token owning a spec, or None when the spec is unknown."""
    if spec_id is None:
        return None
    return SPEC_CLASSES.get(spec_id)
