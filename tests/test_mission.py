import pytest

from swarmsim.core.mission import MissionControl, FaultConfig, COMM_FAILURE, PACKET_LOSS
from swarmsim.core.state import SwarmParameters


@pytest.fixture
def mission():
    return MissionControl(SwarmParameters())


def run(mission, seconds, dt=0.5):
    expired = []
    for _ in range(int(seconds / dt)):
        expired.extend(mission.advance(dt))
    return expired


def test_starts_in_standby(mission):
    assert mission.state.phase == "standby"
    run(mission, 3)
    assert mission.state.elapsed == 0.0


def test_start_and_pause_toggle(mission):
    mission.start()
    assert mission.state.phase == "running"
    assert mission.state.mission == "TRAINING EXERCISE ALPHA"
    mission.pause()
    assert mission.state.phase == "paused"
    mission.pause()
    assert mission.state.phase == "running"


def test_start_resumes_from_pause(mission):
    mission.start()
    mission.pause()
    mission.start("NIGHT SWEEP")
    assert mission.state.phase == "running"
    assert mission.state.mission == "NIGHT SWEEP"


def test_elapsed_only_while_running(mission):
    mission.start()
    run(mission, 2)
    mission.pause()
    run(mission, 5)
    assert mission.state.elapsed == pytest.approx(2.0)
    assert mission.clock == pytest.approx(7.0)


def test_comm_failure_drops_and_restores(mission):
    assert mission.inject_comm_failure() == 70.0
    run(mission, 4.5)
    assert mission.state.signal_strength == 70.0
    assert run(mission, 0.5) == [COMM_FAILURE]
    assert mission.state.signal_strength == 100.0


def test_comm_failure_floors_at_zero(mission):
    mission.state.signal_strength = 20.0
    assert mission.inject_comm_failure() == 0.0
    run(mission, 5)
    assert mission.state.signal_strength == 30.0


def test_overlapping_comm_failures_stay_in_range(mission):
    seen = []
    for _ in range(5):
        seen.append(mission.inject_comm_failure())
        mission.advance(0.5)
        seen.append(mission.state.signal_strength)
    run(mission, 6)
    seen.append(mission.state.signal_strength)
    assert all(0.0 <= s <= 100.0 for s in seen)
    assert mission.state.signal_strength == 100.0
    assert not mission.pending_faults


def test_fault_recovers_while_paused(mission):
    mission.start()
    mission.pause()
    mission.inject_comm_failure()
    run(mission, 5)
    assert mission.state.signal_strength == 100.0
    assert mission.state.elapsed == 0.0


def test_packet_loss_spike_and_revert(mission):
    assert mission.inject_packet_loss() == 250.0
    assert mission.params.comm_latency == 250.0
    run(mission, 2.5)
    assert mission.params.comm_latency == 250.0
    assert run(mission, 0.5) == [PACKET_LOSS]
    assert mission.params.comm_latency == 50.0


def test_packet_loss_reverts_to_prior_latency():
    mission = MissionControl(SwarmParameters(comm_latency=120.0))
    mission.inject_packet_loss()
    assert mission.params.comm_latency == 320.0
    run(mission, 3)
    assert mission.params.comm_latency == 120.0


def test_packet_loss_never_below_baseline():
    mission = MissionControl(SwarmParameters(comm_latency=50.0))
    mission.inject_packet_loss()
    mission.params.comm_latency = 60.0  # operator retuned mid-fault
    run(mission, 3)
    assert mission.params.comm_latency == 50.0


def test_custom_fault_config():
    faults = FaultConfig.from_dict({"signal_drop": 50, "comm_restore_after": 1.0, "bogus": 3})
    mission = MissionControl(SwarmParameters(), faults)
    assert mission.inject_comm_failure() == 50.0
    run(mission, 1.0)
    assert mission.state.signal_strength == 100.0


def test_avoidance_counter_accumulates(mission):
    mission.record_avoidance(3)
    mission.record_avoidance(0)
    mission.record_avoidance(2)
    assert mission.state.collisions_avoided == 5
