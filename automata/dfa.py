from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Tuple

from .evaluator import DfaEvaluator, UnknownSymbolError
from .fsa_table import Table
from .nfa import Nfa, NfaState


@dataclass(frozen=True)
class DfaState:
    name: str
    initial: bool
    accepting: bool
    transitions: Tuple[int, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, 'transitions', tuple(self.transitions))
        for target in self.transitions:
            if not isinstance(target, int) or isinstance(target, bool):
                raise ValueError(f"state '{self.name}' has a non-integer transition target {target!r}")

    def to_nfa_state(self) -> NfaState:
        return NfaState(
            name=self.name,
            initial=self.initial,
            accepting=self.accepting,
            epsilon_transitions=frozenset(),
            transitions=tuple(frozenset([target]) for target in self.transitions),
        )


@dataclass(frozen=True)
class Dfa:
    """
    Total deterministic finite automaton over indexed states.

    A state's position in ``states`` is its identity. Every state has exactly
    one destination index per alphabet symbol, aligned with ``alphabet``, and
    exactly one state is initial, at index ``initial_state``.
    """
    alphabet: Tuple[str, ...]
    states: Tuple[DfaState, ...]
    initial_state: int
    _positions: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, 'alphabet', tuple(self.alphabet))
        object.__setattr__(self, 'states', tuple(self.states))

        for state in self.states:
            if not isinstance(state, DfaState):
                raise ValueError(f"states must be DfaState records, got {type(state).__name__}")
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
                    f"state '{state.name}' has {len(state.transitions)} transitions, "
                    f"expected {len(self.alphabet)}"
                )
            for target in state.transitions:
                if not 0 <= target < len(self.states):
                    raise ValueError(f"state '{state.name}' references unknown state index {target}")

        object.__setattr__(
            self, '_positions', {symbol: pos for pos, symbol in enumerate(self.alphabet)}
        )

    @classmethod
    def from_description(cls, description: Dict) -> 'Dfa':
        from .fsa_compile import compile_dfa
        return compile_dfa(description)

    def symbol_index(self, symbol: str) -> Optional[int]:
        return self._positions.get(symbol)

    def to_nfa(self) -> Nfa:
        return Nfa(
            alphabet=self.alphabet,
            states=tuple(state.to_nfa_state() for state in self.states),
            initial_state=self.initial_state,
        )

    def evaluator(self) -> DfaEvaluator:
        return DfaEvaluator(self)

    def accepts(self, string: Iterable[str]) -> bool:
        """
        Returns whether the DFA accepts the sequence of symbols.
        Symbols outside the alphabet reject the input instead of raising.
        """
        evaluator = self.evaluator()
        try:
            evaluator.step_multiple(string)
        except UnknownSymbolError:
            return False
        return evaluator.is_accepting()

    def to_table(self, separator: str = ' ') -> str:
        table = Table()
        table.push_row(['', '', ''] + list(self.alphabet))

        for state in self.states:
            row = [
                '->' if state.initial else '',
                '*' if state.accepting else '',
                state.name,
            ]
            row.extend(self.states[target].name for target in state.transitions)
            table.push_row(row)

        return table.to_string(separator)

    def equivalent_to(self, other: 'Dfa') -> bool:
        from .fsa_equivalence import are_dfas_equivalent
        return are_dfas_equivalent(self, other)
