import json
import logging

from django.http import HttpResponse, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from .acceptance import run
from .automaton import validate
from .minimization import minimize
from .renaming import group_by_new_name, groups_to_dict
from .rpc import PARSE_ERROR, RpcError, error_response, handle_payload

logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def check_dfa(request):
    """
    Django view to handle DFA acceptance checks.

    Expects a POST request with a JSON body containing:
    - dfa: The DFA definition
    - input: The input string to check (defaults to the empty string)

    Returns a JSON response with the acceptance result and the visited states.
    """
    try:
        data = json.loads(request.body)
        if not isinstance(data, dict):
            return JsonResponse({'error': 'Request body must be a JSON object'}, status=400)
        dfa = data.get('dfa')
        input_string = data.get('input', '')

        if not dfa:
            return JsonResponse({'error': 'Missing DFA definition'}, status=400)
        if not isinstance(input_string, str):
            return JsonResponse({'error': 'input must be a string'}, status=400)

        result = run(validate(dfa), input_string)

        return JsonResponse({
            'accepted': result.accepted,
            'trace': result.trace,
            'rejection_reason': result.rejection_reason,
            'rejection_position': result.rejection_position,
        })

    except ValueError as e:
        logger.warning("Rejected check request: %s", e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Check request failed")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def minimize_dfa(request):
    """
    Django view to handle DFA minimisation requests.

    Expects a POST request with a JSON body containing:
    - dfa: The DFA definition

    Returns a JSON response with the minimised DFA, the original states merged
    into each of its states, and size statistics.
    """
    try:
        data = json.loads(request.body)
        if not isinstance(data, dict):
            return JsonResponse({'error': 'Request body must be a JSON object'}, status=400)
        dfa = data.get('dfa')

        if not dfa:
            return JsonResponse({'error': 'Missing DFA definition'}, status=400)

        original = validate(dfa)
        result = minimize(original)
        groups = group_by_new_name(result.renaming)

        original_count = len(original.states)
        minimized_count = len(result.minimal.states)

        return JsonResponse({
            'minimized_dfa': result.minimal.to_dict(),
            'groups': groups_to_dict(groups),
            'statistics': {
                'original_states_count': original_count,
                'reachable_states_count': len(result.renaming),
                'minimized_states_count': minimized_count,
                'states_reduced': original_count - minimized_count,
                'is_already_minimal': original_count == minimized_count,
            },
        })

    except ValueError as e:
        logger.warning("Rejected minimize request: %s", e)
        return JsonResponse({'error': str(e)}, status=400)
    except Exception as e:
        logger.exception("Minimize request failed")
        return JsonResponse({'error': f'Server error: {str(e)}'}, status=500)


@csrf_exempt
@require_POST
def rpc_endpoint(request):
    """
    JSON-RPC 2.0 endpoint serving the check and minimize procedures.

    Protocol errors are reported inside the JSON-RPC response, so the HTTP
    status is 200, or 204 when the request consisted of notifications only.
    """
    try:
        payload = json.loads(request.body)
    except ValueError as e:
        return JsonResponse(error_response(RpcError(PARSE_ERROR, 'Parse error', str(e))))

    response = handle_payload(payload)
    if response is None:
        return HttpResponse(status=204)
    return JsonResponse(response, safe=False)
