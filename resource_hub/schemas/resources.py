from typing import Any

from pydantic import BaseModel


class BlockAttributeResponse(BaseModel):
    name: str
    type: str
    default: Any


class BlockSchemaResponse(BaseModel):
    kind: str
    attributes: list[BlockAttributeResponse]
