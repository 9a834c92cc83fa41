"""Projections of canonical entities into search documents.

A document is rebuilt wholesale from the entity on every write; nothing is
patched in place.
"""

from shelfbase.domain.entities import Collection, Comment, Item, ItemFields
from shelfbase.infrastructure.search.engine import SearchDocument


def collection_document(collection: Collection) -> SearchDocument:
    return SearchDocument(
        id=collection.id,
        content=collection.name,
        payload={
            "id": collection.id,
            "name": collection.name,
            "owner_id": collection.owner_id,
            "topic_id": collection.topic_id,
        },
    )


def item_document(item: Item, fields: ItemFields) -> SearchDocument:
    """Project an item with its field values.

    Name, tags and the text values are matched; the payload carries what a
    search result needs to be listed without touching the canonical store.
    """
    tags = sorted(item.tags)
    content = " ".join(
        [item.name, *tags, *fields.text_fields.values(), *fields.multiline_text_fields.values()]
    )
    return SearchDocument(
        id=item.id,
        content=content,
        payload={
            "id": item.id,
            "name": item.name,
            "collection_id": item.collection_id,
            "tags": tags,
            "created_at": item.created_at.isoformat(),
        },
    )


def comment_document(comment: Comment) -> SearchDocument:
    return SearchDocument(
        id=comment.id,
        content=comment.text,
        payload={"id": comment.id, "item_id": comment.item_id},
    )
