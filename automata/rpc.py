"""
JSON-RPC 2.0 procedures exposing the DFA operations.

Two procedures are registered, taking positional or named params:
    - check(dfa, input) -> [accepted, trace]
    - minimize(dfa) -> [minimized_dfa, groups]

groups maps every state of the minimized DFA to the states of the original
DFA that were merged into it. Example: q0 and q1 are equivalent and merged
into q0, so groups contains {"q0": ["q0", "q1"]}.
"""
import inspect
import logging
from typing import Any, Dict, List, Optional

from .acceptance import check
from .automaton import MalformedAutomaton, validate
from .minimization import minimize
from .renaming import group_by_new_name, groups_to_dict

logger = logging.getLogger(__name__)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data

    def to_dict(self) -> Dict:
        error = {'code': self.code, 'message': self.message}
        if self.data is not None:
            error['data'] = self.data
        return error


def rpc_check(dfa, input):
    if not isinstance(input, str):
        raise RpcError(INVALID_PARAMS, 'Invalid params', 'input must be a string')
    accepted, trace = check(validate(dfa), input)
    return [accepted, trace]


def rpc_minimize(dfa):
    result = minimize(validate(dfa))
    groups = group_by_new_name(result.renaming)
    return [result.minimal.to_dict(), groups_to_dict(groups)]


METHODS = {
    'check': rpc_check,
    'minimize': rpc_minimize,
}


def error_response(error: RpcError, request_id=None) -> Dict:
    return {'jsonrpc': '2.0', 'error': error.to_dict(), 'id': request_id}


def _call(method, params):
    if params is None:
        params = []
    try:
        if isinstance(params, list):
            bound = inspect.signature(method).bind(*params)
        elif isinstance(params, dict):
            bound = inspect.signature(method).bind(**params)
        else:
            raise RpcError(INVALID_REQUEST, 'Invalid Request', 'params must be an array or an object')
    except TypeError as e:
        raise RpcError(INVALID_PARAMS, 'Invalid params', str(e)) from e

    try:
        return method(*bound.args, **bound.kwargs)
    except MalformedAutomaton as e:
        raise RpcError(INVALID_PARAMS, 'Invalid params', {
            'type': type(e).__name__,
            'message': str(e),
        }) from e


def handle_request(request: Any) -> Optional[Dict]:
    """
    Executes a single JSON-RPC request object.

    Returns:
        Optional[Dict]: The response object, or None for a notification
    """
    if not isinstance(request, dict) or request.get('jsonrpc') != '2.0' \
            or not isinstance(request.get('method'), str):
        return error_response(RpcError(INVALID_REQUEST, 'Invalid Request'))

    is_notification = 'id' not in request
    request_id = request.get('id')

    try:
        method = METHODS.get(request['method'])
        if method is None:
            raise RpcError(METHOD_NOT_FOUND, 'Method not found', request['method'])
        result = _call(method, request.get('params'))
    except RpcError as e:
        logger.warning("RPC %s failed: %s (%s)", request['method'], e.message, e.data)
        response = error_response(e, request_id)
    except Exception as e:
        logger.exception("RPC %s raised an unexpected error", request['method'])
        response = error_response(RpcError(INTERNAL_ERROR, 'Internal error', str(e)), request_id)
    else:
        response = {'jsonrpc': '2.0', 'result': result, 'id': request_id}

    return None if is_notification else response


def handle_payload(payload: Any):
    """
    Executes a decoded JSON-RPC payload, which is a single request or a batch.

    Returns:
        The response object, the list of responses for a batch, or None when
        there is nothing to send back (only notifications)
    """
    if isinstance(payload, list):
        if not payload:
            return error_response(RpcError(INVALID_REQUEST, 'Invalid Request', 'Empty batch'))
        responses: List[Dict] = []
        for request in payload:
            response = handle_request(request)
            if response is not None:
                responses.append(response)
        return responses or None

    return handle_request(payload)
