"""
Right-based protection of Flask routes.

:func:`scoped` runs the authorization chain for the current request. If the
chain rejects the request an :class:`Unauthorized` exception is raised, which
Flask renders as a 401 response; the caller only ever learns that the
request was not authorized, never why. Otherwise the decision is attached to
the request as ``request.auth`` and the route is called.

.. code-block:: python

   @blueprint.route('/ring', methods=['POST'])
   @scoped('doorbell')
   def ring():
       ...

"""

import logging
from functools import wraps
from typing import Any, Callable

from flask import request
from werkzeug.datastructures import WWWAuthenticate
from werkzeug.exceptions import Unauthorized

from . import get_auth

logger = logging.getLogger(__name__)


def scoped(right: str) -> Callable:
    """
    Generate a decorator that requires ``right``.

    Parameters
    ----------
    right : str
        The right the request must hold, e.g. ``doorbell``.

    Returns
    -------
    function

    """
    def protector(func: Callable) -> Callable:
        """Decorator that provides right enforcement."""
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            decision = get_auth().authorize(right)
            if not decision.is_authorized:
                logger.debug('Request is not authorized for %s', right)
                raise Unauthorized('Not authorized',
                                   www_authenticate=WWWAuthenticate('Bearer'))
            request.auth = decision
            return func(*args, **kwargs)
        return wrapper
    return protector
