from typing import List, NamedTuple, Optional, Tuple

from .automaton import Dfa


class Run(NamedTuple):
    """Outcome of simulating a DFA on one input string."""
    accepted: bool
    trace: List[str]
    rejection_reason: Optional[str] = None
    rejection_position: Optional[int] = None


def run(dfa: Dfa, input_string: str) -> Run:
    """
    Simulates a validated DFA on the given input string.

    The trace starts with the starting state and gets one entry per consumed
    symbol. When no transition is defined for the current symbol the run is
    stuck: simulation stops there and the input is rejected, so the trace is
    shorter than len(input_string) + 1.

    Args:
        dfa: A validated automaton
        input_string: The input string to simulate

    Returns:
        Run: accepted flag, visited states, and for rejected input the reason
        and the position at which the rejection happened
    """
    current_state = dfa.start
    trace = [current_state]

    for position, symbol in enumerate(input_string):
        next_state = dfa.target(current_state, symbol)

        if next_state is None:
            if symbol not in dfa.alphabet:
                reason = f"Symbol '{symbol}' not in alphabet"
            else:
                reason = f"No transition defined for symbol '{symbol}' from state '{current_state}'"
            return Run(False, trace, reason, position)

        trace.append(next_state)
        current_state = next_state

    if current_state in dfa.accepting:
        return Run(True, trace)

    return Run(
        False,
        trace,
        f"Final state '{current_state}' is not an accepting state",
        len(input_string),
    )


def check(dfa: Dfa, input_string: str) -> Tuple[bool, List[str]]:
    """Returns (accepted, trace) for input_string; a stuck run is a rejection, not an error."""
    result = run(dfa, input_string)
    return result.accepted, result.trace
