"""
Ristorante API: Route Handlers
===============================

Route Inventory:
    - health.py:        GET    /api/health
    - menu.py:          GET    /api/menu
                        POST   /api/admin/menu
                        PUT    /api/admin/menu/{id}
                        DELETE /api/admin/menu/{id}
    - reservations.py:  POST   /api/reservations
                        GET    /api/admin/reservations?limit=N
                        PUT    /api/admin/reservations/{id}
    - pages.py:         GET    /api/page/{slug}
                        GET    /api/admin/page/{slug}
                        PUT    /api/admin/page/{slug}
    - images.py:        POST   /api/admin/gallery/upload
                        GET    /img/{key}

Each module exposes `router` (public) and/or `admin_router`. Admin routers
carry `dependencies=[<configuration check>, Depends(require_admin)]`, so a
missing DATABASE_URL or image binding is reported first, then the bearer
token is checked, and only then does the handler run.

Routes stay thin: read the request, call a service, shape the response.
"""
