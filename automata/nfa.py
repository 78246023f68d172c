from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, Set, Tuple


@dataclass(frozen=True)
class NfaState:
    name: str
    initial: bool
    accepting: bool
    epsilon_transitions: FrozenSet[int]
    transitions: Tuple[FrozenSet[int], ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'epsilon_transitions', frozenset(self.epsilon_transitions))
        object.__setattr__(self, 'transitions', tuple(frozenset(dests) for dests in self.transitions))

        targets = set(self.epsilon_transitions)
        for dests in self.transitions:
            targets |= dests
        for target in targets:
            if not isinstance(target, int) or isinstance(target, bool):
                raise ValueError(f"state '{self.name}' has a non-integer transition target {target!r}")


@dataclass(frozen=True)
class Nfa:
    """
    Non-deterministic finite automaton over indexed states.

    Each state carries one destination set per alphabet symbol (positionally
    aligned with ``alphabet``) plus a set of epsilon destinations.
    """
    alphabet: Tuple[str, ...]
    states: Tuple[NfaState, ...]
    initial_state: int

    def __post_init__(self) -> None:
        object.__setattr__(self, 'alphabet', tuple(self.alphabet))
        object.__setattr__(self, 'states', tuple(self.states))

        for state in self.states:
            if not isinstance(state, NfaState):
                raise ValueError(f"states must be NfaState records, got {type(state).__name__}")
        if not isinstance(self.initial_state, int) or isinstance(self.initial_state, bool):
            raise ValueError(f"initial_state must be an integer index, got {self.initial_state!r}")
        if len(set(self.alphabet)) != len(self.alphabet):
            raise ValueError("alphabet symbols must be unique")
        if not 0 <= self.initial_state < len(self.states):
            raise ValueError(f"initial_state {self.initial_state} is out of range")

        initial = [idx for idx, state in enumerate(self.states) if state.initial]
        if initial != [self.initial_state]:
            raise ValueError("exactly one state must be initial and match initial_state")

        for state in self.states:
            if len(state.transitions) != len(self.alphabet):
                raise ValueError(
                    f"state '{state.name}' has {len(state.transitions)} transition sets, "
                    f"expected {len(self.alphabet)}"
                )
            targets = set(state.epsilon_transitions)
            for dests in state.transitions:
                targets |= dests
            for target in targets:
                if not 0 <= target < len(self.states):
                    raise ValueError(f"state '{state.name}' references unknown state index {target}")

    @classmethod
    def from_description(cls, description: Dict) -> 'Nfa':
        from .fsa_compile import compile_nfa
        return compile_nfa(description)

    def epsilon_closure(self, indices: Iterable[int]) -> Set[int]:
        closure = set(indices)
        stack = list(closure)
        while stack:
            current = stack.pop()
            for target in self.states[current].epsilon_transitions:
                if target not in closure:
                    closure.add(target)
                    stack.append(target)
        return closure

    def accepts(self, string: Iterable[str]) -> bool:
        """
        Simulates the NFA on a sequence of symbols by tracking the set of
        reachable states. A symbol outside the alphabet rejects the input.
        """
        positions = {symbol: pos for pos, symbol in enumerate(self.alphabet)}
        current = self.epsilon_closure([self.initial_state])

        for symbol in string:
            if symbol not in positions:
                return False
            pos = positions[symbol]
            reached = set()
            for idx in current:
                reached |= self.states[idx].transitions[pos]
            current = self.epsilon_closure(reached)
            if not current:
                return False

        return any(self.states[idx].accepting for idx in current)
