"""Authentication and task authorization.

Learn: Users register/login with email + password and receive a JWT
bearer token. Task routes never require the token: every request is
classified as no-token, valid-user, or invalid-token, and
todoapp.auth.policy turns that into the set of tasks the request may touch.
"""
