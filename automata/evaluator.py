from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .dfa import Dfa, DfaState


class UnknownSymbolError(ValueError):
    """Raised when an evaluator is stepped on a symbol outside the alphabet."""

    def __init__(self, symbol: str):
        super().__init__(f"Symbol '{symbol}' not in alphabet")
        self.symbol = symbol


class DfaEvaluator:
    """
    Cursor over a DFA that consumes symbols one at a time.

    Only the automaton reference and the current state index are held, so
    ``copy()`` is cheap and branching exploration never duplicates automaton
    data. The automaton itself is never mutated.
    """
    __slots__ = ('_dfa', '_current')

    def __init__(self, dfa: 'Dfa', current: Optional[int] = None):
        self._dfa = dfa
        self._current = dfa.initial_state if current is None else current

    @property
    def dfa(self) -> 'Dfa':
        return self._dfa

    def current_state_idx(self) -> int:
        return self._current

    def current_state(self) -> 'DfaState':
        return self._dfa.states[self._current]

    def is_accepting(self) -> bool:
        return self._dfa.states[self._current].accepting

    def step(self, symbol: str) -> None:
        pos = self._dfa.symbol_index(symbol)
        if pos is None:
            raise UnknownSymbolError(symbol)
        self._current = self._dfa.states[self._current].transitions[pos]

    def step_multiple(self, symbols: Iterable[str]) -> None:
        # Symbols consumed before an unknown one stay consumed
        for symbol in symbols:
            self.step(symbol)

    def copy(self) -> 'DfaEvaluator':
        return DfaEvaluator(self._dfa, self._current)

    __copy__ = copy

    def __eq__(self, other) -> bool:
        if not isinstance(other, DfaEvaluator):
            return NotImplemented
        return self._dfa is other._dfa and self._current == other._current

    def __hash__(self) -> int:
        return hash((id(self._dfa), self._current))

    def __repr__(self) -> str:
        return f"DfaEvaluator(state={self.current_state().name!r}, index={self._current})"
