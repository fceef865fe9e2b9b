from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Tuple, Union


class MalformedAutomaton(ValueError):
    """Raised when an automaton violates a structural invariant."""


class InvalidStructure(MalformedAutomaton):
    pass


class InvalidStartState(MalformedAutomaton):
    pass


class InvalidAcceptingState(MalformedAutomaton):
    pass


class InvalidTransition(MalformedAutomaton):
    pass


REQUIRED_KEYS = ['states', 'alphabet', 'transitions', 'start', 'accepting']


@dataclass(frozen=True)
class Dfa:
    """
    A deterministic finite automaton whose transition function may be partial.

    Instances are immutable. Build them through validate() (or Dfa.from_dict)
    so the invariants below hold:
        - start is one of states
        - accepting is a subset of states
        - every transition source and target is a state and every transition
          symbol belongs to the alphabet
    """
    states: FrozenSet[str]
    alphabet: FrozenSet[str]
    transitions: Mapping[Tuple[str, str], str]
    start: str
    accepting: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Freeze the containers so a caller keeping a reference cannot mutate us
        object.__setattr__(self, 'states', frozenset(self.states))
        object.__setattr__(self, 'alphabet', frozenset(self.alphabet))
        object.__setattr__(self, 'accepting', frozenset(self.accepting))
        object.__setattr__(self, 'transitions', MappingProxyType(dict(self.transitions)))

    def __eq__(self, other):
        if not isinstance(other, Dfa):
            return NotImplemented
        return (self.states == other.states
                and self.alphabet == other.alphabet
                and dict(self.transitions) == dict(other.transitions)
                and self.start == other.start
                and self.accepting == other.accepting)

    def __hash__(self):
        return hash((self.states, self.alphabet, frozenset(self.transitions.items()),
                     self.start, self.accepting))

    def target(self, state: str, symbol: str) -> Optional[str]:
        """Returns the state reached from state on symbol, or None if undefined."""
        return self.transitions.get((state, symbol))

    @classmethod
    def from_dict(cls, raw: Dict) -> 'Dfa':
        """
        Decodes the wire representation of an automaton.

        Args:
            raw: A dictionary with the following keys:
                - states: List of unique state names
                - alphabet: List of unique single-character symbols
                - transitions: Either a nested mapping {state: {symbol: target}},
                  a list of [state, symbol, target] triples, or a list of
                  {"from": ..., "symbol": ..., "to": ...} objects
                - start: The starting state
                - accepting: List of accepting states

        Returns:
            Dfa: The decoded automaton (not yet checked against the invariants)

        Raises:
            InvalidStructure: If the shape of raw is wrong
        """
        if not isinstance(raw, dict):
            raise InvalidStructure('Automaton must be a JSON object')

        for key in REQUIRED_KEYS:
            if key not in raw:
                raise InvalidStructure(f'Missing required key: {key}')

        states = _unique_strings(raw['states'], 'states')
        alphabet = _unique_strings(raw['alphabet'], 'alphabet')
        accepting = _string_list(raw['accepting'], 'accepting')

        return cls(
            states=frozenset(states),
            alphabet=frozenset(alphabet),
            transitions=_decode_transitions(raw['transitions']),
            start=raw['start'],
            accepting=frozenset(accepting),
        )

    def to_dict(self) -> Dict:
        """Encodes the automaton in its canonical wire form (sorted, nested transitions)."""
        transitions: Dict[str, Dict[str, str]] = {}
        for (state, symbol) in sorted(self.transitions):
            if state not in transitions:
                transitions[state] = {}
            transitions[state][symbol] = self.transitions[(state, symbol)]

        return {
            'states': sorted(self.states),
            'alphabet': sorted(self.alphabet),
            'transitions': transitions,
            'start': self.start,
            'accepting': sorted(self.accepting),
        }


def validate(raw: Union[Dict, Dfa]) -> Dfa:
    """
    Checks an automaton against its structural invariants.

    Args:
        raw: Either the wire dictionary or an already built Dfa

    Returns:
        Dfa: The validated automaton

    Raises:
        MalformedAutomaton: If any invariant is violated
    """
    dfa = raw if isinstance(raw, Dfa) else Dfa.from_dict(raw)

    _check_names(dfa)

    if dfa.start not in dfa.states:
        raise InvalidStartState(f"Starting state '{dfa.start}' not in states list")

    for state in sorted(dfa.accepting):
        if state not in dfa.states:
            raise InvalidAcceptingState(f"Accepting state '{state}' not in states list")

    for (state, symbol), target in sorted(dfa.transitions.items()):
        if state not in dfa.states:
            raise InvalidTransition(f"Transition from unknown state '{state}'")
        if symbol not in dfa.alphabet:
            raise InvalidTransition(
                f"Transition from '{state}' uses symbol '{symbol}' which is not in the alphabet")
        if target not in dfa.states:
            raise InvalidTransition(
                f"Transition from '{state}' on '{symbol}' leads to unknown state '{target}'")

    return dfa


def _string_list(value, name: str) -> List[str]:
    if not isinstance(value, list):
        raise InvalidStructure(f'{name} must be a list')
    for item in value:
        if not isinstance(item, str):
            raise InvalidStructure(f'{name} must only contain strings')
    return value


def _unique_strings(value, name: str) -> List[str]:
    items = _string_list(value, name)
    seen = set()
    for item in items:
        if item in seen:
            raise InvalidStructure(f"Duplicate entry '{item}' in {name}")
        seen.add(item)
    return items


def _decode_transitions(raw) -> Dict[Tuple[str, str], str]:
    """Normalises every accepted transition shape to {(state, symbol): target}."""
    transitions: Dict[Tuple[str, str], str] = {}

    def add(state, symbol, target):
        if not all(isinstance(part, str) for part in (state, symbol, target)):
            raise InvalidStructure('Transition states and symbols must be strings')
        existing = transitions.get((state, symbol))
        if existing is not None and existing != target:
            raise InvalidStructure(
                f"Conflicting transitions from '{state}' on '{symbol}': "
                f"'{existing}' and '{target}'")
        transitions[(state, symbol)] = target

    if isinstance(raw, dict):
        for state, by_symbol in raw.items():
            if not isinstance(by_symbol, dict):
                raise InvalidStructure(f"Transitions of state '{state}' must be a dictionary")
            for symbol, target in by_symbol.items():
                # Accept the single-element list form [target]
                if isinstance(target, list):
                    if len(target) != 1:
                        raise InvalidStructure(
                            f"Transition from '{state}' on '{symbol}' must have exactly one target")
                    target = target[0]
                add(state, symbol, target)
    elif isinstance(raw, list):
        for entry in raw:
            if isinstance(entry, dict):
                try:
                    add(entry['from'], entry['symbol'], entry['to'])
                except KeyError as e:
                    raise InvalidStructure(f'Transition object missing key: {e.args[0]}') from e
            elif isinstance(entry, (list, tuple)) and len(entry) == 3:
                add(*entry)
            else:
                raise InvalidStructure(
                    'Transitions must be [state, symbol, target] triples or objects')
    else:
        raise InvalidStructure('transitions must be a dictionary or a list')

    return transitions


def _check_names(dfa: Dfa):
    """Checks the name types, non-emptiness and one-character symbols."""
    for name, values in (('states', dfa.states), ('alphabet', dfa.alphabet),
                         ('accepting', dfa.accepting)):
        if not all(isinstance(value, str) for value in values):
            raise InvalidStructure(f'{name} must only contain strings')
    if not isinstance(dfa.start, str):
        raise InvalidStructure('start must be a string')
    for key, target in dfa.transitions.items():
        if not (isinstance(key, tuple) and len(key) == 2
                and all(isinstance(part, str) for part in (*key, target))):
            raise InvalidStructure('Transition states and symbols must be strings')

    if not dfa.states:
        raise InvalidStructure('states must not be empty')
    if not dfa.alphabet:
        raise InvalidStructure('alphabet must not be empty')
    for symbol in sorted(dfa.alphabet):
        if len(symbol) != 1:
            raise InvalidStructure(f"Symbol '{symbol}' must be a single character")
