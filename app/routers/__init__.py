"""
Routers package.
HTTP surface: system info, users (employee records) and uploads.
"""
