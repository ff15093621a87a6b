# Routes package init
"""
Gist Relay — API Routes Package
================================

Route Inventory:
    - gist.py:    GET  /api?id=<gist id>   (fetch a shared notebook)
                  POST /api                (share a notebook as a gist)
    - health.py:  GET  /health             (service health check)

Routes stay thin: read the request, validate presence of input, call the
GistService, shape the response. Errors are raised, never returned.
"""
