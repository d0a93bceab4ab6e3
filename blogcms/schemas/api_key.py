# blogcms/schemas/api_key.py
from pydantic import BaseModel, Field


class ApiKeyCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)


class ApiKeyRead(BaseModel):
    id: str
    name: str
    prefix: str
    created_at: str
    updated_at: str
    last_used_at: str | None = None
    created_by: str | None = None


class ApiKeyCreated(ApiKeyRead):
    # Sólo se devuelve una vez, al crearla.
    key: str
