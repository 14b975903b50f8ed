"""
Ristorante API: Request/Response Schemas
=========================================

Request bodies subclass `RequestBody`, whose `from_body()` converts Pydantic
errors into a single ValidationError message (→ 400 `{"error": ...}`).
Response models define the JSON shapes and the OpenAPI docs.
"""
