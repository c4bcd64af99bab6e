"""
Cache API Service - FastAPI Application

Responsibilities:
- Serve the published cache files from the cache root at the URL root
- Report which published files are currently available

Endpoints:
- GET /health - Health check with per-file availability
- GET /{name} - Static file (byte ranges supported)

No authentication; bind to a local address.
"""
