from itertools import product

from django.test import TestCase
from automata.acceptance import check
from automata.automaton import validate
from automata.minimization import (
    initial_partition,
    minimize,
    reachable_states,
    refine_partition,
)


def all_strings(alphabet, max_length):
    for length in range(max_length + 1):
        for letters in product(sorted(alphabet), repeat=length):
            yield ''.join(letters)


class TestMinimize(TestCase):
    """Test cases for DFA minimisation"""

    def assertSameLanguage(self, dfa, minimal, max_length=5):
        for test_string in all_strings(dfa.alphabet, max_length):
            self.assertEqual(check(dfa, test_string)[0], check(minimal, test_string)[0],
                             f"Disagreement on string '{test_string}'")

    def test_merges_equivalent_states(self):
        # q1 and q2 are both accepting and move to q1 on 'a' and q2 on 'b'
        dfa = validate({
            'states': ['q0', 'q1', 'q2'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'q0': {'a': 'q1', 'b': 'q2'},
                'q1': {'a': 'q1', 'b': 'q2'},
                'q2': {'a': 'q1', 'b': 'q2'}
            },
            'start': 'q0',
            'accepting': ['q1', 'q2']
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(renaming, {'q0': 'q0', 'q1': 'q1', 'q2': 'q1'})
        self.assertEqual(minimal.states, frozenset({'q0', 'q1'}))
        self.assertEqual(minimal.start, 'q0')
        self.assertEqual(minimal.accepting, frozenset({'q1'}))
        self.assertEqual(dict(minimal.transitions), {
            ('q0', 'a'): 'q1', ('q0', 'b'): 'q1',
            ('q1', 'a'): 'q1', ('q1', 'b'): 'q1',
        })
        self.assertSameLanguage(dfa, minimal)

    def test_non_accepting_states_merged(self):
        # Accepts strings ending with 'a'; S0, S1 and S2 behave identically
        dfa = validate({
            'states': ['S0', 'S1', 'S2', 'S3'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'S0': {'a': 'S3', 'b': 'S1'},
                'S1': {'a': 'S3', 'b': 'S2'},
                'S2': {'a': 'S3', 'b': 'S1'},
                'S3': {'a': 'S3', 'b': 'S1'}
            },
            'start': 'S0',
            'accepting': ['S3']
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(minimal.states, frozenset({'S0', 'S3'}))
        self.assertEqual(renaming['S1'], 'S0')
        self.assertEqual(renaming['S2'], 'S0')
        self.assertSameLanguage(dfa, minimal)

    def test_already_minimal(self):
        dfa = validate({
            'states': ['S0', 'S1', 'S2'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'S0': {'a': 'S1', 'b': 'S0'},
                'S1': {'a': 'S2', 'b': 'S0'},
                'S2': {'a': 'S2', 'b': 'S2'}
            },
            'start': 'S0',
            'accepting': ['S2']
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(minimal, dfa)
        self.assertEqual(renaming, {'S0': 'S0', 'S1': 'S1', 'S2': 'S2'})

    def test_unreachable_states_dropped(self):
        dfa = validate({
            'states': ['q0', 'q1', 'q3'],
            'alphabet': ['a'],
            'transitions': {
                'q0': {'a': 'q1'},
                'q1': {'a': 'q0'},
                'q3': {'a': 'q0'}
            },
            'start': 'q0',
            'accepting': ['q1', 'q3']
        })

        minimal, renaming = minimize(dfa)

        self.assertNotIn('q3', renaming)
        self.assertNotIn('q3', minimal.states)
        self.assertEqual(set(renaming), {'q0', 'q1'})
        self.assertSameLanguage(dfa, minimal)

    def test_missing_transitions_distinguish_states(self):
        # q1 has no 'b' transition while q2 loops, so they are not equivalent
        dfa = validate({
            'states': ['q0', 'q1', 'q2'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'q0': {'a': 'q1', 'b': 'q2'},
                'q1': {'a': 'q1'},
                'q2': {'a': 'q2', 'b': 'q2'}
            },
            'start': 'q0',
            'accepting': ['q1', 'q2']
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(len(minimal.states), 3)
        self.assertIsNone(minimal.target('q1', 'b'))
        self.assertSameLanguage(dfa, minimal)

    def test_no_accepting_states(self):
        dfa = validate({
            'states': ['q0', 'q1'],
            'alphabet': ['a'],
            'transitions': {'q0': {'a': 'q1'}, 'q1': {'a': 'q0'}},
            'start': 'q0',
            'accepting': []
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(minimal.states, frozenset({'q0'}))
        self.assertEqual(minimal.accepting, frozenset())
        self.assertEqual(dict(minimal.transitions), {('q0', 'a'): 'q0'})

    def test_single_state_without_transitions(self):
        dfa = validate({
            'states': ['only'],
            'alphabet': ['a'],
            'transitions': {},
            'start': 'only',
            'accepting': ['only']
        })

        minimal, renaming = minimize(dfa)

        self.assertEqual(minimal, dfa)
        self.assertEqual(renaming, {'only': 'only'})

    def test_input_not_modified(self):
        raw = {
            'states': ['q0', 'q1', 'q2'],
            'alphabet': ['a'],
            'transitions': {'q0': {'a': 'q1'}, 'q1': {'a': 'q2'}, 'q2': {'a': 'q2'}},
            'start': 'q0',
            'accepting': ['q1', 'q2']
        }
        dfa = validate(raw)

        minimize(dfa)

        self.assertEqual(dfa, validate(raw))
        self.assertEqual(len(dfa.states), 3)

    def test_idempotent(self):
        dfa = validate({
            'states': ['a0', 'a1', 'a2', 'a3', 'a4'],
            'alphabet': ['0', '1'],
            'transitions': {
                'a0': {'0': 'a1', '1': 'a2'},
                'a1': {'0': 'a3', '1': 'a4'},
                'a2': {'0': 'a4', '1': 'a3'},
                'a3': {'0': 'a3', '1': 'a3'},
                'a4': {'0': 'a4', '1': 'a4'}
            },
            'start': 'a0',
            'accepting': ['a3', 'a4']
        })

        first = minimize(dfa).minimal
        second = minimize(first).minimal

        self.assertEqual(first.states, frozenset({'a0', 'a1', 'a3'}))
        self.assertEqual(second, first)

    def test_deterministic_under_reordering(self):
        raw = {
            'states': ['p', 'r', 'q', 's'],
            'alphabet': ['b', 'a'],
            'transitions': [['s', 'a', 's'], ['p', 'a', 'q'], ['q', 'a', 's'],
                            ['p', 'b', 'r'], ['r', 'a', 's']],
            'start': 'p',
            'accepting': ['q', 'r']
        }
        reordered = {
            'states': ['s', 'q', 'r', 'p'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'r': {'a': 's'},
                'p': {'b': 'r', 'a': 'q'},
                'q': {'a': 's'},
                's': {'a': 's'}
            },
            'start': 'p',
            'accepting': ['r', 'q']
        }

        first = minimize(validate(raw))
        second = minimize(validate(reordered))

        self.assertEqual(first, second)
        self.assertEqual(first.renaming, {'p': 'p', 'q': 'q', 'r': 'q', 's': 's'})


class TestPartitionHelpers(TestCase):
    def setUp(self):
        self.dfa = validate({
            'states': ['q0', 'q1', 'q2', 'q3', 'q4'],
            'alphabet': ['a', 'b'],
            'transitions': {
                'q0': {'a': 'q1'},
                'q1': {'b': 'q2'},
                'q2': {'a': 'q2'},
                'q4': {'a': 'q0'}
            },
            'start': 'q0',
            'accepting': ['q2']
        })

    def test_reachable_states(self):
        self.assertEqual(reachable_states(self.dfa), {'q0', 'q1', 'q2'})

    def test_initial_partition(self):
        partition = initial_partition(self.dfa, {'q0', 'q1', 'q2'})

        self.assertEqual(partition, [frozenset({'q0', 'q1'}), frozenset({'q2'})])

    def test_initial_partition_omits_empty_block(self):
        partition = initial_partition(self.dfa, {'q0', 'q1'})

        self.assertEqual(partition, [frozenset({'q0', 'q1'})])

    def test_refine_partition(self):
        partition = refine_partition(self.dfa, initial_partition(self.dfa, {'q0', 'q1', 'q2'}))

        self.assertEqual(partition, [frozenset({'q0'}), frozenset({'q1'}), frozenset({'q2'})])

    def test_refine_partition_requires_closed_partition(self):
        with self.assertRaisesRegex(ValueError, "q1"):
            refine_partition(self.dfa, [frozenset({'q0'})])


class TestMinimizeProperties(TestCase):
    """Language preservation and partition cover over a family of automata"""

    def automata(self):
        # Every total DFA over {a} with three states, start q0 and accepting {q2}
        states = ['q0', 'q1', 'q2']
        for targets in product(states, repeat=3):
            yield validate({
                'states': states,
                'alphabet': ['a'],
                'transitions': {state: {'a': target} for state, target in zip(states, targets)},
                'start': 'q0',
                'accepting': ['q2']
            })

    def test_language_preserved(self):
        for dfa in self.automata():
            minimal = minimize(dfa).minimal
            for test_string in all_strings(dfa.alphabet, 6):
                self.assertEqual(check(dfa, test_string)[0], check(minimal, test_string)[0])

    def test_renaming_covers_reachable_states(self):
        for dfa in self.automata():
            minimal, renaming = minimize(dfa)
            self.assertEqual(set(renaming), reachable_states(dfa))
            self.assertEqual(set(renaming.values()), set(minimal.states))
            for new_name in renaming.values():
                self.assertEqual(renaming[new_name], new_name)
