"""
Ristorante API: Middleware Package
===================================

Middleware Chain (outermost first):
    Request → [Request ID] → [Access Log] → [CORS] → [GZip] → Router

    1. Request ID: correlation ID for every log line of the request
    2. Access Log: method, path, status and duration, including preflights
    3. CORS: answers OPTIONS with 204 before routing, stamps the fixed
       header set on everything else
"""
