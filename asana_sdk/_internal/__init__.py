"""Internal modules for the Asana SDK.

These are not intended for direct use in application code.

Modules:
    http - Shared HTTP client configuration
    request - Request path/query construction and response decoding
"""
