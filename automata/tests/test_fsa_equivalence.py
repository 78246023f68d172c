import json

from django.test import TestCase
from automata.dfa import Dfa, DfaState
from automata.fsa_compile import compile_dfa
from automata.fsa_equivalence import (
    alphabets_match,
    are_dfas_equivalent,
    check_equivalence,
    explore_product_pairs
)


ENDS_IN_ONE = {
    'states': ['q0', 'q1'],
    'alphabet': ['0', '1'],
    'transitions': {
        'q0': {'0': ['q0'], '1': ['q1']},
        'q1': {'0': ['q0'], '1': ['q1']}
    },
    'startingState': 'q0',
    'acceptingStates': ['q1']
}

# Same language as ENDS_IN_ONE with a redundant state
ENDS_IN_ONE_THREE_STATES = {
    'states': ['A', 'B', 'C'],
    'alphabet': ['1', '0'],
    'transitions': {
        'A': {'0': ['C'], '1': ['B']},
        'B': {'0': ['C'], '1': ['B']},
        'C': {'0': ['C'], '1': ['B']}
    },
    'startingState': 'A',
    'acceptingStates': ['B']
}

ENDS_IN_ZERO = {
    'states': ['q0', 'q1'],
    'alphabet': ['0', '1'],
    'transitions': {
        'q0': {'0': ['q1'], '1': ['q0']},
        'q1': {'0': ['q1'], '1': ['q0']}
    },
    'startingState': 'q0',
    'acceptingStates': ['q1']
}


class TestFSAEquivalence(TestCase):
    """Test cases for DFA language equivalence"""

    def setUp(self):
        self.ends_in_one = compile_dfa(ENDS_IN_ONE)
        self.ends_in_one_three = compile_dfa(ENDS_IN_ONE_THREE_STATES)
        self.ends_in_zero = compile_dfa(ENDS_IN_ZERO)

    def test_reflexive(self):
        for dfa in (self.ends_in_one, self.ends_in_one_three, self.ends_in_zero):
            self.assertTrue(are_dfas_equivalent(dfa, dfa))

    def test_equivalent_different_shape(self):
        self.assertTrue(are_dfas_equivalent(self.ends_in_one, self.ends_in_one_three))
        self.assertTrue(self.ends_in_one.equivalent_to(self.ends_in_one_three))

    def test_not_equivalent(self):
        self.assertFalse(are_dfas_equivalent(self.ends_in_one, self.ends_in_zero))
        self.assertFalse(are_dfas_equivalent(self.ends_in_one_three, self.ends_in_zero))

    def test_symmetric(self):
        dfas = [self.ends_in_one, self.ends_in_one_three, self.ends_in_zero]
        for dfa1 in dfas:
            for dfa2 in dfas:
                self.assertEqual(are_dfas_equivalent(dfa1, dfa2), are_dfas_equivalent(dfa2, dfa1))

    def test_alphabet_mismatch(self):
        """An unused extra symbol still makes the automata inequivalent"""
        extended = json.loads(json.dumps(ENDS_IN_ONE))
        extended['alphabet'].append('2')
        extended['states'].append('sink')
        extended['transitions']['q0']['2'] = ['sink']
        extended['transitions']['q1']['2'] = ['sink']
        extended['transitions']['sink'] = {'0': ['sink'], '1': ['sink'], '2': ['sink']}
        extended_dfa = compile_dfa(extended)

        self.assertFalse(alphabets_match(self.ends_in_one, extended_dfa))
        self.assertFalse(are_dfas_equivalent(self.ends_in_one, extended_dfa))
        self.assertFalse(are_dfas_equivalent(extended_dfa, self.ends_in_one))

    def test_alphabet_same_size_different_symbols(self):
        renamed = json.loads(json.dumps(ENDS_IN_ONE).replace('"0"', '"a"'))
        renamed_dfa = compile_dfa(renamed)
        self.assertFalse(alphabets_match(self.ends_in_one, renamed_dfa))
        self.assertFalse(are_dfas_equivalent(self.ends_in_one, renamed_dfa))

    def test_alphabet_order_irrelevant(self):
        self.assertTrue(alphabets_match(self.ends_in_one, self.ends_in_one_three))

    def test_relabeling_invariance(self):
        """Permuting and renaming states does not change the verdict"""
        relabeled = compile_dfa({
            'states': ['y', 'x'],
            'alphabet': ['0', '1'],
            'transitions': {
                'x': {'0': ['x'], '1': ['y']},
                'y': {'0': ['x'], '1': ['y']}
            },
            'startingState': 'x',
            'acceptingStates': ['y']
        })
        for other in (self.ends_in_one, self.ends_in_one_three, self.ends_in_zero):
            self.assertEqual(are_dfas_equivalent(relabeled, other),
                             are_dfas_equivalent(self.ends_in_one, other))

    def test_unreachable_states_ignored(self):
        dfa = json.loads(json.dumps(ENDS_IN_ONE))
        dfa['states'].append('unreachable')
        dfa['transitions']['unreachable'] = {'0': ['unreachable'], '1': ['unreachable']}
        dfa['acceptingStates'].append('unreachable')
        self.assertTrue(are_dfas_equivalent(compile_dfa(dfa), self.ends_in_one))

    def test_empty_alphabet(self):
        accepting = Dfa(alphabet=(), states=(DfaState('s', True, True, ()),), initial_state=0)
        rejecting = Dfa(alphabet=(), states=(DfaState('s', True, False, ()),), initial_state=0)
        self.assertTrue(are_dfas_equivalent(accepting, accepting))
        self.assertFalse(are_dfas_equivalent(accepting, rejecting))

    def test_initial_states_disagree(self):
        accept_all = compile_dfa({
            'states': ['s'],
            'alphabet': ['0', '1'],
            'transitions': {'s': {'0': ['s'], '1': ['s']}},
            'startingState': 's',
            'acceptingStates': ['s']
        })
        equivalent, visited = explore_product_pairs(accept_all, self.ends_in_one)
        self.assertFalse(equivalent)
        self.assertEqual(visited, {(0, 0)})

    def test_explored_pairs_bounded(self):
        equivalent, visited = explore_product_pairs(self.ends_in_one, self.ends_in_one_three)
        self.assertTrue(equivalent)
        self.assertLessEqual(len(visited), len(self.ends_in_one.states) * len(self.ends_in_one_three.states))
        self.assertEqual(visited, {(0, 0), (0, 2), (1, 1)})

    def test_explored_pairs_mod_counters(self):
        """Counters modulo 2 and 3 differ; identical counters only visit diagonal pairs"""
        def counter(n):
            return Dfa(
                alphabet=('a',),
                states=tuple(DfaState(f'c{i}', i == 0, i == 0, ((i + 1) % n,)) for i in range(n)),
                initial_state=0,
            )
        mod2 = counter(2)
        mod3 = counter(3)
        self.assertFalse(are_dfas_equivalent(mod2, mod3))

        mod6 = counter(6)
        mod3_twice = counter(3)
        equivalent, visited = explore_product_pairs(mod3, mod3_twice)
        self.assertTrue(equivalent)
        self.assertEqual(len(visited), 3)

        equivalent, visited = explore_product_pairs(mod6, mod6)
        self.assertTrue(equivalent)
        self.assertEqual(len(visited), 6)

    def test_alphabet_mismatch_explores_nothing(self):
        other = compile_dfa({
            'states': ['s'],
            'alphabet': ['0'],
            'transitions': {'s': {'0': ['s']}},
            'startingState': 's',
            'acceptingStates': []
        })
        self.assertEqual(explore_product_pairs(self.ends_in_one, other), (False, set()))


class TestCheckEquivalence(TestCase):
    """Test cases for the string based equivalence query"""

    def test_equivalent(self):
        result = check_equivalence(json.dumps(ENDS_IN_ONE), json.dumps(ENDS_IN_ONE_THREE_STATES))
        self.assertEqual(result, 'Equivalent')

    def test_not_equivalent(self):
        result = check_equivalence(json.dumps(ENDS_IN_ONE), json.dumps(ENDS_IN_ZERO))
        self.assertEqual(result, 'Not equivalent')

    def test_accepts_dictionaries(self):
        self.assertEqual(check_equivalence(ENDS_IN_ONE, ENDS_IN_ONE), 'Equivalent')

    def test_parse_error_first(self):
        result = check_equivalence('not json', json.dumps(ENDS_IN_ONE))
        self.assertTrue(result.startswith('Error parsing 1: '))

    def test_parse_error_second(self):
        result = check_equivalence(json.dumps(ENDS_IN_ONE), '{"states": ["q0"]}')
        self.assertEqual(result, 'Error parsing 2: Missing required key: alphabet')

    def test_compile_error(self):
        broken = json.loads(json.dumps(ENDS_IN_ONE))
        broken['transitions']['q1']['1'] = ['missing']
        result = check_equivalence(json.dumps(ENDS_IN_ONE), json.dumps(broken))
        self.assertTrue(result.startswith('Error compiling 2: '))
        self.assertIn("undefined state 'missing'", result)

    def test_first_error_reported(self):
        result = check_equivalence('[', '[')
        self.assertTrue(result.startswith('Error parsing 1'))

    def test_deeply_nested_json_is_parse_error(self):
        result = check_equivalence('[' * 100000, json.dumps(ENDS_IN_ONE))
        self.assertTrue(result.startswith('Error parsing 1: '))

        result = check_equivalence(json.dumps(ENDS_IN_ONE), '{"a": ' * 100000)
        self.assertTrue(result.startswith('Error parsing 2: '))
