"""
Ristorante API: Service Layer
==============================

Business logic between the route handlers and the database / object store.
Services are stateless singletons; the session or store they act on is
passed into every call.
"""
