import json
import logging

from django.conf import settings
from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .fsa_compile import compile_dfa, nfa_to_description, validate_description
from .fsa_equivalence import EQUIVALENT, NOT_EQUIVALENT, check_equivalence

logger = logging.getLogger(__name__)


def _load_dfa(data):
    fsa = data.get('fsa')
    if not fsa:
        raise ValueError('Missing FSA definition')

    validation = validate_description(fsa)
    if not validation['valid']:
        raise ValueError(validation['error'])

    return compile_dfa(fsa)


@csrf_exempt
@require_POST
def check_dfa_equivalence(request):
    """
    Django view to check whether two DFAs accept the same language.

    Expects a POST request with a JSON body containing:
    - automaton1: The first DFA, as JSON text or an FSA definition
    - automaton2: The second DFA, as JSON text or an FSA definition

    Returns a JSON response with 'result' set to 'Equivalent' or 'Not equivalent'.
    """
    try:
        data = json.loads(request.body)
        automaton1 = data.get('automaton1')
        automaton2 = data.get('automaton2')

        if not automaton1 or not automaton2:
            return JsonResponse({'error': 'Two automata are required'}, status=400)

        result = check_equivalence(automaton1, automaton2)

        if result not in (EQUIVALENT, NOT_EQUIVALENT):
            logger.warning('Rejected equivalence request: %s', result)
            return JsonResponse({'error': result}, status=400)

        return JsonResponse({
            'result': result,
            'equivalent': result == EQUIVALENT
        })

    except ValueError as e:
        logger.warning('Rejected equivalence request: %s', e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception('Equivalence check failed')
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def dfa_accepts(request):
    """
    Django view to test whether a DFA accepts an input.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition in the proper format (must be a total DFA)
    - input: A list of symbols, or a string read one character per symbol

    Symbols outside the alphabet reject the input.
    """
    try:
        data = json.loads(request.body)
        dfa = _load_dfa(data)

        symbols = data.get('input', [])
        if isinstance(symbols, str):
            symbols = list(symbols)
        elif not isinstance(symbols, list) or not all(isinstance(symbol, str) for symbol in symbols):
            raise ValueError('input must be a string or a list of symbols')

        return JsonResponse({
            'accepted': dfa.accepts(symbols)
        })

    except ValueError as e:
        logger.warning('Rejected accepts request: %s', e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception('Accepts check failed')
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def dfa_table(request):
    """
    Django view to render a DFA as a transition table.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition in the proper format (must be a total DFA)
    - separator: Optional column separator
    """
    try:
        data = json.loads(request.body)
        dfa = _load_dfa(data)
        separator = data.get('separator', settings.AUTOMATA_TABLE_SEPARATOR)

        return JsonResponse({
            'table': dfa.to_table(separator)
        })

    except ValueError as e:
        logger.warning('Rejected table request: %s', e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception('Table rendering failed')
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def dfa_to_nfa(request):
    """
    Django view to embed a DFA into the NFA representation.

    Expects a POST request with a JSON body containing:
    - fsa: The FSA definition in the proper format (must be a total DFA)

    Returns a JSON response with the equivalent NFA.
    """
    try:
        data = json.loads(request.body)
        dfa = _load_dfa(data)

        return JsonResponse({
            'success': True,
            'nfa': nfa_to_description(dfa.to_nfa())
        })

    except ValueError as e:
        logger.warning('Rejected conversion request: %s', e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception('DFA to NFA conversion failed')
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)
