"""Authentication.

Learn: Stateless JWT auth in three pieces:
1. TokenCodec (jwt.py) issues and verifies HS256 tokens
2. AuthenticationGateMiddleware turns a bearer token into request.state.identity
3. get_current_identity (dependencies.py) rejects anonymous callers on protected routes

Registration and login live in services/auth_service.py.
"""
