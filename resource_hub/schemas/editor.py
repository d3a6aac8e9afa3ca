from pydantic import BaseModel


class EditorItem(BaseModel):
    id: int
    title: str


class EditorTerm(BaseModel):
    slug: str
    name: str
    count: int


class EditorData(BaseModel):
    """Everything the block editor needs to populate its pickers."""

    resources: list[EditorItem]
    collections: list[EditorItem]
    types: list[EditorTerm]
    topics: list[EditorTerm]
    audiences: list[EditorTerm]
