"""
auth — Student authentication module.

Provides:
  • Layered bcrypt password verifiers
  • Signed bearer token creation & verification
  • Credential store and session issuer
  • Signup / login / profile API routes
  • ``get_current_identity`` / ``require_roles`` FastAPI dependencies
"""
