"""
Auth package for the Blog API.

Provides HTTP Basic authentication against the credential store:
password hashing (utils), the credential check (service) and the
FastAPI dependency that guards write routes (dependencies).
"""
