"""
Bearer token authorization for the iotsa embedded web server.

A request carrying an ``Authorization: Bearer ...`` header is offered to a
chain of strategies: a static table of administrator-issued tokens, then a
signed-token (JWT) strategy checked against a single trusted issuer. When
neither strategy recognizes the credential, the decision is delegated to the
next authenticator (usually username/password).
"""
