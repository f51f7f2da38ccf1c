"""
Pydantic request/response models.

All models derive from schemas.common.CamelModel: camelCase on the wire,
snake_case toward the database.
"""
