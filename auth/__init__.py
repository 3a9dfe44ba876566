"""
auth — User registration and login.

Provides:
  • Password hashing (bcrypt)
  • Login token creation & verification (HS256 JWT)
  • ``AuthService`` register / login flows
  • Register / Login API routes
"""
