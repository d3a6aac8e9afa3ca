from .taxonomy import Taxonomy, Term, resource_terms
from .resource import PublishStatus, Resource, ResourceMeta
from .collection import Collection, CollectionItem

__all__ = [
    "Collection",
    "CollectionItem",
    "PublishStatus",
    "Resource",
    "ResourceMeta",
    "Taxonomy",
    "Term",
    "resource_terms",
]
