"""Tests for the result envelope and records."""

from __future__ import annotations

import pytest

from pyadt_pulse.exceptions import PulseSessionExpired
from pyadt_pulse.models import Action, DeviceStatus, OperationResult, ZoneRecord


class TestOperationResult:
    def test_failed_never_carries_info(self):
        result = OperationResult(action=Action.SYNC, success=False, info={"syncCode": "1-0-0"})

        assert result.info is None

    def test_ok(self):
        result = OperationResult.ok(Action.LOGIN, {"version": "21.0.0-132"})

        assert result.success is True
        assert result.error is None
        assert result.info == {"version": "21.0.0-132"}

    def test_raise_for_error(self):
        error = PulseSessionExpired("gone", action=Action.SYNC)
        result = OperationResult.failed(Action.SYNC, error)

        with pytest.raises(PulseSessionExpired):
            result.raise_for_error()

    def test_raise_for_error_on_success_is_noop(self):
        OperationResult.ok(Action.LOGOUT).raise_for_error()

    def test_to_dict_flattens_records(self):
        status = DeviceStatus("Security Panel", "ADT", "Panel", "Disarmed", "All Quiet")
        result = OperationResult.ok([Action.GET_DEVICE_INFO, Action.GET_DEVICE_STATUS], status)

        assert result.to_dict() == {
            "action": ["GET_DEVICE_INFO", "GET_DEVICE_STATUS"],
            "success": True,
            "info": {
                "name": "Security Panel",
                "make": "ADT",
                "type": "Panel",
                "state": "Disarmed",
                "status": "All Quiet",
            },
        }

    def test_to_dict_zone_list(self):
        zone = ZoneRecord("sensor-1", "Front Door", "sensor,doorWindow", "devStatOK")

        info = OperationResult.ok(Action.GET_ZONE_STATUS, [zone]).to_dict()["info"]

        assert info == [{"id": "sensor-1", "name": "Front Door", "tags": "sensor,doorWindow", "state": "devStatOK"}]

    def test_to_dict_failure(self):
        result = OperationResult.failed(Action.HOST_UNREACHABLE)

        assert result.to_dict() == {"action": "HOST_UNREACHABLE", "success": False, "info": None}


class TestRecords:
    @pytest.mark.parametrize(
        ("state", "armed", "disarmed"),
        [
            ("Armed Away", True, False),
            ("Armed Stay", True, False),
            ("Disarmed", False, True),
            ("Status Unavailable", False, False),
        ],
    )
    def test_device_arm_flags(self, state, armed, disarmed):
        status = DeviceStatus("Panel", "ADT", "Panel", state, "")

        assert status.is_armed is armed
        assert status.is_disarmed is disarmed

    def test_zone_tag_set(self):
        zone = ZoneRecord("sensor-3", "Back Door", "sensor, doorWindow", "devStatOpen")

        assert zone.tag_set == frozenset({"sensor", "doorWindow"})
        assert zone.state_name == "open"

    def test_unknown_zone_state(self):
        assert ZoneRecord("sensor-4", "Hall", "sensor", "devStatNew").state_name == "unknown"

    def test_action_is_str(self):
        assert Action.HOST_UNREACHABLE == "HOST_UNREACHABLE"
