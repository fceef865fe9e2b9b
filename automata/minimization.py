import logging
from collections import deque
from typing import Dict, FrozenSet, List, NamedTuple, Set

from .automaton import Dfa

logger = logging.getLogger(__name__)

# Signature entry for a symbol with no outgoing transition
NO_TRANSITION = -1


class MinimizationResult(NamedTuple):
    minimal: Dfa
    renaming: Dict[str, str]


def reachable_states(dfa: Dfa) -> Set[str]:
    """Returns the states reachable from the starting state via defined transitions."""
    # BFS from start state to find all reachable states
    reachable = {dfa.start}
    queue = deque([dfa.start])
    symbols = sorted(dfa.alphabet)

    while queue:
        current = queue.popleft()
        for symbol in symbols:
            target = dfa.target(current, symbol)
            if target is not None and target not in reachable:
                reachable.add(target)
                queue.append(target)

    return reachable


def _canonical(blocks) -> List[FrozenSet[str]]:
    return sorted((frozenset(block) for block in blocks if block), key=min)


def initial_partition(dfa: Dfa, states: Set[str]) -> List[FrozenSet[str]]:
    """Splits states into accepting and non-accepting blocks, omitting an empty block."""
    accepting = {s for s in states if s in dfa.accepting}
    non_accepting = states - accepting
    return _canonical([accepting, non_accepting])


def refine_partition(dfa: Dfa, partition: List[FrozenSet[str]]) -> List[FrozenSet[str]]:
    """
    Refines a partition until no block can be split any further.

    In each round every state gets a signature: for every symbol of the alphabet
    (in sorted order) the index of the block its target currently lies in, or
    NO_TRANSITION. Blocks whose members have different signatures are split
    into one sub-block per signature. A round that splits nothing is the
    fixpoint, and the number of rounds is bounded by the number of states.

    Args:
        dfa: The automaton the partition belongs to
        partition: Blocks of states closed under the transitions of dfa

    Returns:
        List[FrozenSet[str]]: The coarsest stable refinement, sorted by the
        smallest member of each block

    Raises:
        ValueError: If a transition leaves the states covered by partition
    """
    symbols = sorted(dfa.alphabet)
    partition = _canonical(partition)
    covered = set().union(*partition)
    for state in sorted(covered):
        for symbol in symbols:
            target = dfa.target(state, symbol)
            if target is not None and target not in covered:
                raise ValueError(
                    f"Partition does not cover state '{target}' reached from '{state}' on '{symbol}'")

    rounds = 0

    while True:
        rounds += 1
        block_of = {state: index for index, block in enumerate(partition) for state in block}

        new_partition = []
        for block in partition:
            by_signature: Dict[tuple, Set[str]] = {}
            for state in block:
                signature = tuple(
                    block_of[target] if target is not None else NO_TRANSITION
                    for target in (dfa.target(state, symbol) for symbol in symbols)
                )
                if signature not in by_signature:
                    by_signature[signature] = set()
                by_signature[signature].add(state)
            new_partition.extend(by_signature.values())

        new_partition = _canonical(new_partition)
        if len(new_partition) == len(partition):
            logger.debug("Partition stable after %d rounds with %d blocks", rounds, len(partition))
            return new_partition
        partition = new_partition


def minimize(dfa: Dfa) -> MinimizationResult:
    """
    Minimises a DFA by partition refinement.

    Unreachable states are discarded first, so they appear neither in the
    minimal automaton nor in the renaming map. Each remaining equivalence class
    is named after its lexicographically smallest member, which makes the
    result independent of input ordering. The given automaton is not modified.

    Args:
        dfa: A validated automaton

    Returns:
        MinimizationResult: the minimal automaton and the map from every
        reachable original state to the state it was merged into
    """
    reachable = reachable_states(dfa)
    partition = refine_partition(dfa, initial_partition(dfa, reachable))

    renaming: Dict[str, str] = {}
    for block in partition:
        representative = min(block)
        for state in block:
            renaming[state] = representative

    new_transitions = {}
    for (state, symbol), target in dfa.transitions.items():
        if state in renaming:
            new_transitions[(renaming[state], symbol)] = renaming[target]

    minimal = Dfa(
        states=frozenset(renaming.values()),
        alphabet=dfa.alphabet,
        transitions=new_transitions,
        start=renaming[dfa.start],
        accepting=frozenset(renaming[s] for s in reachable if s in dfa.accepting),
    )

    logger.debug(
        "Minimised DFA from %d states (%d reachable) to %d states",
        len(dfa.states), len(reachable), len(minimal.states),
    )
    return MinimizationResult(minimal, renaming)
