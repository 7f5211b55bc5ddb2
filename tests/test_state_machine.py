import pytest

from haquests.constants import TCPState
from haquests.state_machine import StateMachine


def test_starts_closed():
    assert StateMachine().state is TCPState.CLOSED


def test_active_open_and_close():
    sm = StateMachine()
    sm.on_send_syn()
    assert sm.state is TCPState.SYN_SENT
    sm.on_receive_synack()
    assert sm.state is TCPState.ESTABLISHED
    sm.on_send_fin()
    assert sm.state is TCPState.FIN_WAIT_1
    sm.on_receive_ack()
    assert sm.state is TCPState.FIN_WAIT_2
    sm.on_receive_fin()
    assert sm.state is TCPState.TIME_WAIT


@pytest.mark.parametrize(
    "start, event, expected",
    [
        (TCPState.SYN_RECEIVED, "on_send_ack", TCPState.ESTABLISHED),
        (TCPState.ESTABLISHED, "on_receive_fin", TCPState.CLOSE_WAIT),
        (TCPState.FIN_WAIT_1, "on_receive_fin", TCPState.CLOSING),
        (TCPState.CLOSING, "on_receive_ack", TCPState.TIME_WAIT),
        (TCPState.LAST_ACK, "on_receive_ack", TCPState.CLOSED),
        (TCPState.SYN_SENT, "on_established", TCPState.ESTABLISHED),
        (TCPState.ESTABLISHED, "on_close", TCPState.CLOSED),
        (TCPState.SYN_SENT, "on_reset", TCPState.CLOSED),
    ],
)
def test_transitions(start, event, expected):
    sm = StateMachine(start)
    getattr(sm, event)()
    assert sm.state is expected


@pytest.mark.parametrize(
    "start, event",
    [
        (TCPState.ESTABLISHED, "on_send_syn"),
        (TCPState.CLOSED, "on_receive_synack"),
        (TCPState.CLOSED, "on_send_ack"),
        (TCPState.SYN_SENT, "on_send_fin"),
        (TCPState.CLOSED, "on_receive_fin"),
        (TCPState.ESTABLISHED, "on_receive_ack"),
    ],
)
def test_events_ignored_in_other_states(start, event):
    sm = StateMachine(start)
    getattr(sm, event)()
    assert sm.state is start


def test_state_can_be_forced_and_any_transition_allowed():
    sm = StateMachine()
    sm.state = TCPState.LISTEN
    assert sm.state is TCPState.LISTEN
    assert all(sm.can_transition(s) for s in TCPState)