"""Cross-cutting HTTP plumbing shared by every app.

Response envelope, error taxonomy, pagination and the auth rate limiter live
here so the domain apps only raise and return plain data.
"""
