import logging
from typing import Dict, Set, Tuple, Union

from .dfa import Dfa
from .fsa_compile import compile_dfa, parse_description

logger = logging.getLogger(__name__)

EQUIVALENT = 'Equivalent'
NOT_EQUIVALENT = 'Not equivalent'


def alphabets_match(dfa1: Dfa, dfa2: Dfa) -> bool:
    """
    Two automata are only comparable when their alphabets have the same size
    and contain the same symbols. Symbol order is irrelevant.
    """
    if len(dfa1.alphabet) != len(dfa2.alphabet):
        return False
    return set(dfa1.alphabet) == set(dfa2.alphabet)


def explore_product_pairs(dfa1: Dfa, dfa2: Dfa) -> Tuple[bool, Set[Tuple[int, int]]]:
    """
    Explores the pairs of states reachable by feeding both DFAs the same input.

    Starting from the pair of initial states, every reachable pair is visited
    once. The exploration stops at the first pair that disagrees on acceptance.

    Args:
        dfa1: First DFA
        dfa2: Second DFA

    Returns:
        A tuple of (equivalent, visited_pairs) where visited_pairs holds the
        (index in dfa1, index in dfa2) pairs discovered so far
    """
    if not alphabets_match(dfa1, dfa2):
        return False, set()

    start = (dfa1.evaluator(), dfa2.evaluator())
    to_explore = [start]
    visited = {(start[0].current_state_idx(), start[1].current_state_idx())}

    while to_explore:
        s1, s2 = to_explore.pop()

        # Both must be accepting or both rejecting
        if s1.is_accepting() != s2.is_accepting():
            logger.debug(
                "States '%s' and '%s' disagree on acceptance",
                s1.current_state().name, s2.current_state().name,
            )
            return False, visited

        for symbol in dfa1.alphabet:
            d1 = s1.copy()
            d1.step(symbol)
            d2 = s2.copy()
            d2.step(symbol)

            pair = (d1.current_state_idx(), d2.current_state_idx())
            if pair not in visited:
                visited.add(pair)
                to_explore.append((d1, d2))

    return True, visited


def are_dfas_equivalent(dfa1: Dfa, dfa2: Dfa) -> bool:
    """
    Check if two DFAs accept exactly the same language.

    DFAs over different alphabets are never equivalent.
    """
    equivalent, visited = explore_product_pairs(dfa1, dfa2)
    logger.debug(
        'Equivalence check explored %d of at most %d state pairs: %s',
        len(visited), len(dfa1.states) * len(dfa2.states),
        EQUIVALENT if equivalent else NOT_EQUIVALENT,
    )
    return equivalent


def check_equivalence(automaton1: Union[str, Dict], automaton2: Union[str, Dict]) -> str:
    """
    Compares two textual automaton descriptions.

    Returns:
        'Equivalent' or 'Not equivalent', or a human-readable error naming the
        failing stage (parsing or compiling) and input (1 or 2)
    """
    dfas = []
    for number, text in enumerate((automaton1, automaton2), start=1):
        try:
            description = parse_description(text)
        except ValueError as e:
            logger.info('Could not parse automaton %d: %s', number, e)
            return f'Error parsing {number}: {e}'

        try:
            dfas.append(compile_dfa(description))
        except ValueError as e:
            logger.info('Could not compile automaton %d: %s', number, e)
            return f'Error compiling {number}: {e}'

    return EQUIVALENT if are_dfas_equivalent(*dfas) else NOT_EQUIVALENT
