"""
Services Package

Business logic kept apart from HTTP handling (routers).

Current services:
- security.py: Password hashing (bcrypt)
- tokens.py: Bearer token issuing and verification (JWT)
- users.py: Credential store on the users collection
- oauth.py: Google sign-in (authorization-code flow)
- rate_limiter.py: Rate limiting for the credential endpoints
"""
