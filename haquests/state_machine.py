"""TCP connection state transitions."""

from haquests.constants import TCPState


class StateMachine:
    """Tracks the state of one TCP connection; ``state`` may be set directly."""

    def __init__(self, state=TCPState.CLOSED):
        self.state = state

    def _move(self, transitions):
        self.state = transitions.get(self.state, self.state)

    def on_send_syn(self):
        self._move({TCPState.CLOSED: TCPState.SYN_SENT})

    def on_receive_synack(self):
        self._move({TCPState.SYN_SENT: TCPState.ESTABLISHED})

    def on_send_ack(self):
        self._move({TCPState.SYN_RECEIVED: TCPState.ESTABLISHED})

    def on_established(self):
        self.state = TCPState.ESTABLISHED

    def on_send_fin(self):
        self._move({TCPState.ESTABLISHED: TCPState.FIN_WAIT_1})

    def on_receive_fin(self):
        self._move(
            {
                TCPState.ESTABLISHED: TCPState.CLOSE_WAIT,
                TCPState.FIN_WAIT_1: TCPState.CLOSING,
                TCPState.FIN_WAIT_2: TCPState.TIME_WAIT,
            }
        )

    def on_receive_ack(self):
        self._move(
            {
                TCPState.FIN_WAIT_1: TCPState.FIN_WAIT_2,
                TCPState.CLOSING: TCPState.TIME_WAIT,
                TCPState.LAST_ACK: TCPState.CLOSED,
            }
        )

    def on_close(self):
        self.state = TCPState.CLOSED

    def on_reset(self):
        self.state = TCPState.CLOSED

    def can_transition(self, new_state):
        """Return whether moving to ``new_state`` is allowed; every move is."""
        return True