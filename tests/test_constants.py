import pytest

from haquests.constants import TCPFlag, TCPState


@pytest.mark.parametrize(
    "flag, value",
    [
        (TCPFlag.FIN, 0x01),
        (TCPFlag.SYN, 0x02),
        (TCPFlag.RST, 0x04),
        (TCPFlag.PSH, 0x08),
        (TCPFlag.ACK, 0x10),
        (TCPFlag.URG, 0x20),
    ],
)
def test_flag_values_match_wire_bits(flag, value):
    assert int(flag) == value
    assert TCPFlag(value) is flag


def test_combined_flags_contain_their_parts():
    synack = TCPFlag(0x12)
    assert synack == TCPFlag.SYN | TCPFlag.ACK
    assert TCPFlag.SYN in synack
    assert TCPFlag.ACK in synack
    assert TCPFlag.FIN not in synack
    assert synack & ~TCPFlag.SYN == TCPFlag.ACK


def test_flags_fit_in_one_byte():
    every = TCPFlag(0)
    for flag in TCPFlag:
        every |= flag
    assert int(every).to_bytes(1, "big")[0] == int(every)


def test_states_are_distinct_and_ordered():
    states = list(TCPState)
    assert states[0] is TCPState.CLOSED
    assert states[-1] is TCPState.TIME_WAIT
    assert len({state.value for state in states}) == len(states)
    assert TCPState(TCPState.ESTABLISHED.value) is TCPState.ESTABLISHED
    assert TCPState["ESTABLISHED"] is TCPState.ESTABLISHED