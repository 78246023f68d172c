import json
from typing import Dict, List, Union

from .dfa import Dfa, DfaState
from .nfa import Nfa, NfaState

EPSILON = ''


class DescriptionParseError(ValueError):
    """The text of an automaton description could not be read."""


class DfaCompileError(ValueError):
    """A description does not define a valid total DFA."""


class NfaCompileError(ValueError):
    """A description does not define a valid NFA."""


def validate_description(description: Dict) -> Dict:
    """
    Validates that an automaton description has the required structure.

    Args:
        description: The automaton dictionary to validate

    Returns:
        Dict: Validation result with 'valid' boolean and optional 'error' message
    """
    if not isinstance(description, dict):
        return {'valid': False, 'error': 'Automaton description must be a dictionary'}

    required_keys = ['states', 'alphabet', 'transitions', 'startingState', 'acceptingStates']

    for key in required_keys:
        if key not in description:
            return {'valid': False, 'error': f'Missing required key: {key}'}

    if not isinstance(description['states'], list):
        return {'valid': False, 'error': 'states must be a list'}

    if not isinstance(description['alphabet'], list):
        return {'valid': False, 'error': 'alphabet must be a list'}

    if not isinstance(description['transitions'], dict):
        return {'valid': False, 'error': 'transitions must be a dictionary'}

    if not isinstance(description['acceptingStates'], list):
        return {'valid': False, 'error': 'acceptingStates must be a list'}

    starting = description['startingState']
    if starting is not None and not isinstance(starting, str) and not (
            isinstance(starting, list) and all(isinstance(name, str) for name in starting)):
        return {'valid': False, 'error': 'startingState must be a state name or a list of state names'}

    for key in ('states', 'alphabet', 'acceptingStates'):
        for item in description[key]:
            if not isinstance(item, str):
                return {'valid': False, 'error': f'{key} must only contain strings'}

    for state, state_transitions in description['transitions'].items():
        if not isinstance(state_transitions, dict):
            return {'valid': False, 'error': f"transitions for state '{state}' must be a dictionary"}
        for symbol, dests in state_transitions.items():
            if isinstance(dests, str):
                continue
            if not isinstance(dests, list) or not all(isinstance(dest, str) for dest in dests):
                return {
                    'valid': False,
                    'error': f"transition from '{state}' on '{symbol}' must be a state name or a list of state names",
                }

    return {'valid': True}


def parse_description(text: Union[str, Dict]) -> Dict:
    """
    Reads an automaton description from JSON text (or an already decoded
    dictionary) and checks its structure.

    Raises:
        DescriptionParseError: if the text is not JSON or lacks the required structure
    """
    if isinstance(text, dict):
        description = text
    else:
        try:
            description = json.loads(text)
        except (TypeError, RecursionError, json.JSONDecodeError) as e:
            raise DescriptionParseError(f'Invalid JSON: {e}') from e

    validation = validate_description(description)
    if not validation['valid']:
        raise DescriptionParseError(validation['error'])

    return description


def _starting_states(description: Dict) -> List[str]:
    starting = description['startingState']
    if not starting:
        return []
    if isinstance(starting, str):
        return [starting]
    return list(starting)


def _destinations(value) -> List[str]:
    # A single destination may be written without the surrounding list
    if isinstance(value, str):
        return [value]
    return list(value)


def _check_names(description: Dict, error: type) -> Dict[str, int]:
    indices: Dict[str, int] = {}
    for idx, name in enumerate(description['states']):
        if name in indices:
            raise error(f"State '{name}' is defined more than once")
        indices[name] = idx

    seen = set()
    for symbol in description['alphabet']:
        if symbol == EPSILON:
            raise error('The empty string cannot be an alphabet symbol')
        if symbol in seen:
            raise error(f"Symbol '{symbol}' appears more than once in the alphabet")
        seen.add(symbol)

    starting = _starting_states(description)
    if len(starting) != 1:
        raise error(f'Automaton must have exactly one initial state, found {len(starting)}')
    if starting[0] not in indices:
        raise error(f"Starting state '{starting[0]}' is not defined")

    for name in description['acceptingStates']:
        if name not in indices:
            raise error(f"Accepting state '{name}' is not defined")

    for name in description['transitions']:
        if name not in indices:
            raise error(f"Transitions are given for undefined state '{name}'")

    return indices


def compile_dfa(description: Dict) -> Dfa:
    """
    Builds an indexed, total DFA from a structured description.

    Every state needs exactly one destination for every alphabet symbol and
    every referenced state must be defined.

    Args:
        description: An automaton dictionary in the app's JSON format

    Returns:
        Dfa: The compiled automaton

    Raises:
        DfaCompileError: if the description does not define a valid total DFA
    """
    validation = validate_description(description)
    if not validation['valid']:
        raise DfaCompileError(validation['error'])

    indices = _check_names(description, DfaCompileError)
    alphabet = description['alphabet']
    starting = _starting_states(description)[0]
    accepting = set(description['acceptingStates'])

    states = []
    for name in description['states']:
        state_transitions = description['transitions'].get(name, {})

        for symbol in state_transitions:
            if symbol == EPSILON:
                raise DfaCompileError(f"State '{name}' has an epsilon transition")
            if symbol not in alphabet:
                raise DfaCompileError(f"State '{name}' has a transition on unknown symbol '{symbol}'")

        targets = []
        for symbol in alphabet:
            if symbol not in state_transitions:
                raise DfaCompileError(f"State '{name}' has no transition on symbol '{symbol}'")

            dests = _destinations(state_transitions[symbol])
            if len(dests) != 1:
                raise DfaCompileError(
                    f"State '{name}' has {len(dests)} transitions on symbol '{symbol}', expected exactly one"
                )
            if dests[0] not in indices:
                raise DfaCompileError(
                    f"Transition from '{name}' on '{symbol}' references undefined state '{dests[0]}'"
                )
            targets.append(indices[dests[0]])

        states.append(DfaState(
            name=name,
            initial=name == starting,
            accepting=name in accepting,
            transitions=tuple(targets),
        ))

    return Dfa(alphabet=tuple(alphabet), states=tuple(states), initial_state=indices[starting])


def compile_nfa(description: Dict) -> Nfa:
    """
    Builds an indexed NFA from a structured description. Missing symbols mean
    no transition and the empty symbol lists epsilon destinations.

    Raises:
        NfaCompileError: if the description references undefined states or symbols
    """
    validation = validate_description(description)
    if not validation['valid']:
        raise NfaCompileError(validation['error'])

    indices = _check_names(description, NfaCompileError)
    alphabet = description['alphabet']
    starting = _starting_states(description)[0]
    accepting = set(description['acceptingStates'])

    def resolve(name: str, symbol: str, value) -> frozenset:
        resolved = set()
        for dest in _destinations(value):
            if dest not in indices:
                label = 'epsilon' if symbol == EPSILON else f"'{symbol}'"
                raise NfaCompileError(
                    f"Transition from '{name}' on {label} references undefined state '{dest}'"
                )
            resolved.add(indices[dest])
        return frozenset(resolved)

    states = []
    for name in description['states']:
        state_transitions = description['transitions'].get(name, {})

        for symbol in state_transitions:
            if symbol != EPSILON and symbol not in alphabet:
                raise NfaCompileError(f"State '{name}' has a transition on unknown symbol '{symbol}'")

        states.append(NfaState(
            name=name,
            initial=name == starting,
            accepting=name in accepting,
            epsilon_transitions=resolve(name, EPSILON, state_transitions.get(EPSILON, [])),
            transitions=tuple(
                resolve(name, symbol, state_transitions.get(symbol, [])) for symbol in alphabet
            ),
        ))

    return Nfa(alphabet=tuple(alphabet), states=tuple(states), initial_state=indices[starting])


def _unique_names(states) -> List[str]:
    names = [state.name for state in states]
    if len(set(names)) != len(names):
        raise ValueError('State names must be unique to produce a description')
    return names


def dfa_to_description(dfa: Dfa) -> Dict:
    """
    Renders a DFA in the app's JSON description format.
    """
    names = _unique_names(dfa.states)
    return {
        'states': names,
        'alphabet': list(dfa.alphabet),
        'transitions': {
            state.name: {
                symbol: [names[target]] for symbol, target in zip(dfa.alphabet, state.transitions)
            }
            for state in dfa.states
        },
        'startingState': names[dfa.initial_state],
        'acceptingStates': [state.name for state in dfa.states if state.accepting],
    }


def nfa_to_description(nfa: Nfa) -> Dict:
    """
    Renders an NFA in the app's JSON description format, epsilon
    destinations under the empty symbol.
    """
    names = _unique_names(nfa.states)
    transitions = {}
    for state in nfa.states:
        state_transitions = {
            symbol: sorted(names[target] for target in dests)
            for symbol, dests in zip(nfa.alphabet, state.transitions)
            if dests
        }
        if state.epsilon_transitions:
            state_transitions[EPSILON] = sorted(names[target] for target in state.epsilon_transitions)
        transitions[state.name] = state_transitions

    return {
        'states': names,
        'alphabet': list(nfa.alphabet),
        'transitions': transitions,
        'startingState': names[nfa.initial_state],
        'acceptingStates': [state.name for state in nfa.states if state.accepting],
    }
