"""
auth — User authentication module.

Provides:
  • JWT session token issuance & verification (``TokenService``)
  • Password hashing (bcrypt, ``PasswordHasher``)
  • Credential / payload validation
  • Register / Login workflow and API routes
  • ``get_current_user`` FastAPI dependency (``AuthGuard``)
"""
