"""
Tests for message dispatch and combat log replay sessions.
"""

from unittest.mock import Mock

import pytest

from deathlogger.config.settings import InvalidSettingError
from deathlogger.database.state import PersistedState
from deathlogger.database.store import DeathRecordStore
from deathlogger.models.records import DeathRecord
from deathlogger.parser.parser import CombatLogParser
from deathlogger.providers.combat_log import CombatLogContext
from deathlogger.streaming.dispatcher import (
    ConfigChanged,
    DamageEventReceived,
    DeathLogger,
    DeathOccurred,
    MessageType,
)
from deathlogger.streaming.session import CombatLogSession, LogClock
from deathlogger.tracking.resolver import UNKNOWN_KILLER
from deathlogger.tracking.window import EventWindow

from .conftest import OTHER_GUID, SUBJECT_GUID, make_damage


@pytest.fixture
def death_logger(clock):
    return DeathLogger(
        window=EventWindow(window_seconds=6.0, clock=clock, subject_id=SUBJECT_GUID),
        store=DeathRecordStore(max_entries=200),
        wall_clock=clock,
    )


class TestMessages:
    """Test message types."""

    def test_message_types(self):
        assert DamageEventReceived(make_damage(1.0)).type is MessageType.DAMAGE_EVENT_RECEIVED
        assert DeathOccurred().type is MessageType.DEATH_OCCURRED
        assert ConfigChanged("max_entries", 5).type is MessageType.CONFIG_CHANGED


class TestDeathLogger:
    """Test dispatching messages to the window, recorder and settings."""

    def test_damage_then_death(self, death_logger, clock):
        assert death_logger.dispatch(DamageEventReceived(make_damage(clock.now, overkill=7))) is None

        record = death_logger.dispatch(DeathOccurred())

        assert record.killer.source_name == "Ulgrax the Devourer"
        assert record.recorded_at == clock.now
        assert death_logger.store.last() is record
        assert death_logger.window.is_empty

    def test_damage_to_other_units_ignored(self, death_logger, clock):
        death_logger.dispatch(DamageEventReceived(make_damage(clock.now, target_id=OTHER_GUID)))

        record = death_logger.dispatch(DeathOccurred())

        assert record.killer == UNKNOWN_KILLER

    def test_config_changes(self, death_logger):
        death_logger.dispatch(ConfigChanged("max_entries", "3"))
        death_logger.dispatch(ConfigChanged("window_seconds", 2))
        death_logger.dispatch(ConfigChanged("screenshot_on", "off"))
        death_logger.dispatch(ConfigChanged("screenshot_delay", "1.5"))

        assert death_logger.store.max_entries == 3
        assert death_logger.window.window_seconds == 2.0
        assert death_logger.screenshot_on is False
        assert death_logger.screenshot_delay == 1.5

    @pytest.mark.parametrize(
        "setting, value, message",
        [
            ("max_entries", "abc", "Invalid capacity value."),
            ("screenshot_delay", "soon", "Invalid delay value."),
            ("screenshot_delay", -1, "Invalid delay value."),
        ],
    )
    def test_invalid_config_leaves_state_unchanged(self, death_logger, setting, value, message):
        with pytest.raises(InvalidSettingError) as exc_info:
            death_logger.dispatch(ConfigChanged(setting, value))

        assert str(exc_info.value) == message
        assert death_logger.store.max_entries == 200
        assert death_logger.screenshot_delay == 0.5

    def test_unknown_setting(self, death_logger):
        with pytest.raises(InvalidSettingError):
            death_logger.apply_setting("volume", 11)

    def test_screenshot_hook_called_with_delay(self, death_logger):
        hook = Mock()
        death_logger.screenshot_hook = hook

        death_logger.dispatch(DeathOccurred())

        hook.assert_called_once_with(0.5)

    def test_screenshot_hook_skipped_when_off(self, death_logger):
        hook = Mock()
        death_logger.screenshot_hook = hook
        death_logger.apply_setting("screenshot_on", False)

        death_logger.dispatch(DeathOccurred())

        hook.assert_not_called()

    def test_failing_screenshot_hook_keeps_record(self, death_logger):
        death_logger.screenshot_hook = Mock(side_effect=OSError("no display"))

        record = death_logger.dispatch(DeathOccurred())

        assert death_logger.store.last() is record

    def test_state_round_trip(self, clock):
        existing = DeathRecord(recorded_at=1.0, killer=UNKNOWN_KILLER)
        state = PersistedState.from_records([existing], max_entries=5, screenshot_on=False, screenshot_delay=2.0)

        death_logger = DeathLogger.from_state(state, clock=clock, wall_clock=clock)
        death_logger.dispatch(DeathOccurred())
        saved = death_logger.to_state()

        assert death_logger.screenshot_on is False
        assert death_logger.screenshot_delay == 2.0
        assert saved.max_entries == 5
        assert saved.screenshot_on is False
        assert len(saved.deaths) == 2
        assert saved.records()[0] == existing


class TestLogClock:
    """Test the log-driven clock."""

    def test_advances_monotonically(self):
        clock = LogClock()
        clock.advance(10.0)
        clock.advance(5.0)

        assert clock() == 10.0


class TestCombatLogSession:
    """Test replaying a combat log into a DeathLogger."""

    def build_session(self, subject_id=SUBJECT_GUID):
        clock = LogClock()
        context = CombatLogContext(subject_id=subject_id)
        death_logger = DeathLogger.from_state(
            PersistedState(), subject_id=subject_id, clock=clock, wall_clock=clock, providers=context
        )
        return CombatLogSession(death_logger, context, clock)

    def test_replay_records_death(self, sample_log_lines):
        session = self.build_session()

        records = session.run(CombatLogParser().parse_lines(sample_log_lines))

        assert len(records) == 1
        record = records[0]
        assert record.killer.source_name == "Ulgrax the Devourer"
        assert record.killer.detail == "Brutal Crush"
        assert record.killer.overkill == 12000
        assert record.identity.name == "Thrall"
        assert record.identity.realm == "Draenor"
        assert record.identity.class_name == "SHAMAN"
        assert record.location.zone == "Nerub-ar Palace"
        assert record.location.subzone == "The Gilded Cradle"
        assert record.instance.difficulty_name == "Mythic"
        assert len(record.inventory.equipped) == 2
        assert record.currency is None
        assert session.metrics.deaths_recorded == 1

    def test_record_time_is_log_time(self, sample_log_lines):
        session = self.build_session()
        events = list(CombatLogParser().parse_lines(sample_log_lines))
        death_time = events[8].timestamp

        record = session.run(events)[0]

        assert record.recorded_at == death_time

    def test_stale_damage_is_pruned_by_later_hits(self, sample_log_lines):
        """Test that the early melee hit leaves the window when newer damage arrives."""
        session = self.build_session()
        events = list(CombatLogParser().parse_lines(sample_log_lines))

        session.run(events[:5])
        assert len(session.death_logger.window) == 1

        # Non-lethal hit 7.5s after the melee swing
        session.feed(events[7])
        window = session.death_logger.window.snapshot()
        assert [e.spell_or_cause_name for e in window] == ["Digestive Acid"]

        record = session.feed(events[8])
        assert record.killer.detail == "Digestive Acid"

    def test_other_deaths_ignored(self, sample_log_lines):
        session = self.build_session(subject_id=OTHER_GUID)

        records = session.run(CombatLogParser().parse_lines(sample_log_lines))

        assert records == []
        assert session.death_logger.store.count() == 0
