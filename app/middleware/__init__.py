"""
Middleware package.
"""
