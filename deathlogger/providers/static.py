"""
Providers backed by fixed values from the YAML configuration.
"""

import logging
from typing import Any, Dict, Optional

from .base import SnapshotProviders
from ..config.wow_data import get_spec_class
from ..models.records import Identity, Location, round_coordinate

logger = logging.getLogger(__name__)


class StaticProviders(SnapshotProviders):
    """
    Returns the same snapshots for every death.

    Useful when replaying a combat log, which carries no money and only
    part of the character's identity.
    """

    def __init__(
        self,
        identity: Optional[Identity] = None,
        location: Optional[Location] = None,
        money: Optional[int] = None,
    ):
        self._identity = identity
        self._location = location
        self._money = money

    @classmethod
    def from_config(cls, blocks: Dict[str, Any]) -> "StaticProviders":
        """
        Build providers from the identity/location/money config blocks.

        Example YAML::

            identity: {name: Thrall, realm: Draenor, level: 80, spec_id: 263}
            location: {zone: Orgrimmar, subzone: Valley of Wisdom, x: 39.5, y: 80.1}
            money: 123456
        """
        identity = None
        if isinstance(blocks.get("identity"), dict):
            data = blocks["identity"]
            spec_id = data.get("spec_id")
            identity = Identity(
                name=data.get("name"),
                realm=data.get("realm"),
                level=data.get("level"),
                class_name=data.get("class") or get_spec_class(spec_id),
                spec_id=spec_id,
            )

        location = None
        if isinstance(blocks.get("location"), dict):
            data = blocks["location"]
            location = Location(
                zone=data.get("zone"),
                subzone=data.get("subzone"),
                map_id=data.get("map_id"),
                x=round_coordinate(data.get("x")),
                y=round_coordinate(data.get("y")),
            )

        money = blocks.get("money")
        if money is not None:
            try:
                money = int(money)
            except (TypeError, ValueError):
                logger.warning(f"Ignoring non-numeric money value {money!r}")
                money = None

        return cls(identity=identity, location=location, money=money)

    def identity(self) -> Optional[Identity]:
        return self._identity

    def location(self) -> Optional[Location]:
        return self._location

    def currency(self) -> Optional[int]:
        return self._money
