"""
Administrative routes for the token table and the trusted issuer.

These mirror the device's ``/tokens`` form: the table is edited as a whole
(``ntoken`` plus ``token<i>``/``rights<i>`` for each row) and saved as a
whole. Both forms require the ``tokens`` right.
"""

import logging
from typing import List

from flask import Blueprint, jsonify, render_template, request
from werkzeug.datastructures import MultiDict
from werkzeug.exceptions import BadRequest

from .auth import get_auth
from .auth.decorators import scoped
from .domain import Token, TokenTable

logger = logging.getLogger(__name__)

blueprint = Blueprint('admin', __name__, url_prefix='',
                      template_folder='templates')

ADMIN_RIGHT = 'tokens'
MAX_TOKENS = 100


def _parse_token_form(form: MultiDict) -> TokenTable:
    """Build a new token table from the submitted form."""
    try:
        ntoken = int(form['ntoken'])
    except (KeyError, ValueError) as e:
        raise BadRequest('ntoken must be a number') from e
    if ntoken < 0 or ntoken > MAX_TOKENS:
        raise BadRequest(f'ntoken must be between 0 and {MAX_TOKENS}')
    tokens: List[Token] = []
    for i in range(ntoken):
        tokens.append(Token(form.get(f'token{i}', '').strip(),
                            form.get(f'rights{i}', '').strip()))
    return TokenTable(tuple(tokens))


@blueprint.route('/tokens', methods=['GET', 'POST'])
@scoped(ADMIN_RIGHT)
def edit_tokens():
    """Show the static token table, replacing it if the form was sent."""
    auth = get_auth()
    if 'ntoken' in request.values:
        table = _parse_token_form(request.values)
        auth.tokens.replace_all(table, auth.store)
    return render_template('iotsa_auth/tokens.html',
                           table=auth.tokens.snapshot())


@blueprint.route('/issuer', methods=['GET', 'POST'])
@scoped(ADMIN_RIGHT)
def edit_issuer():
    """
    Show the trusted issuer, replacing it if the form was sent.

    The key is never echoed back. An empty ``issuerKey`` keeps the current
    key; ``clearKey`` removes it, which disables signed tokens.
    """
    auth = get_auth()
    if 'trustedIssuer' in request.values:
        current = auth.trust.get()
        issuer = request.values['trustedIssuer'].strip()
        key = request.values.get('issuerKey', '')
        if request.values.get('clearKey'):
            key = ''
        elif not key:
            key = current.issuer_key
        auth.trust.set(issuer, key, auth.store)
    return render_template('iotsa_auth/issuer.html', anchor=auth.trust.get())


@blueprint.route('/authinfo', methods=['GET'])
def info():
    """Which token strategies are enabled. Reveals no secrets."""
    auth = get_auth()
    anchor = auth.trust.get()
    return jsonify({
        'static_tokens': auth.tokens.ntoken > 0,
        'signed_tokens': anchor.enabled,
        'trusted_issuer': anchor.trusted_issuer or None,
    })
