# Middleware package init
"""
QA Extractor: Middleware Package
===================================

Middleware Chain (order matters!):
    Request → [Request ID] → [Logging] → Route Handler

    1. Request ID: correlation ID for logs and the X-Request-ID header
    2. Logging: access line with status and duration, tagged with the ID
"""
