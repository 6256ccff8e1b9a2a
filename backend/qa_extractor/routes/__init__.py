# Routes package init
"""
QA Extractor: API Routes Package
===================================

Route Inventory:
    - root.py:     GET  /              (welcome message)
    - extract.py:  POST /extract_qa    (image → question/answer pairs)
    - health.py:   GET  /health        (service health check)

Routes stay thin: they resolve request input, call a service, and return a
schema. Error formatting lives in the exception handlers in main.py.
"""
