"""
Creator/Name Synchronizer.

Keeps the two duplicated facts of a resource in step:

- creator (canonical) <-> the kind's creator-like detail field
  (bookDetails.author, podcastDetails.hosts, practiceDetails.originator, ...)
- title (canonical) -> the kind's detail name field (podcastName, appName, ...)

Precedence for creators:
1. creator non-empty: detail field is overwritten with creator
2. creator empty, detail field non-empty: creator is filled from the detail field
3. both empty: nothing to do

Title always wins over the detail name field.
"""

from loguru import logger

from ..models.entities import Resource
from ..registry import describe
from ..utils.text import clean_names, coerce_names


def sync(resource: Resource) -> Resource:
    """
    Return a copy of resource with creator and name fields synchronized.

    Pure and idempotent: sync(sync(r)) == sync(r).
    """
    spec = describe(resource.kind)
    detail_updates: dict = {}

    creator = clean_names(resource.creator)

    if spec.creator_field:
        detail_creators = coerce_names(getattr(resource.detail, spec.creator_field))
        if creator:
            if detail_creators != creator:
                logger.debug(
                    f"Overwriting {spec.detail_key}.{spec.creator_field} {detail_creators} "
                    f"with creator {creator}"
                )
            detail_updates[spec.creator_field] = list(creator)
        elif detail_creators:
            logger.debug(f"Filling creator from {spec.detail_key}.{spec.creator_field}")
            creator = list(detail_creators)
            detail_updates[spec.creator_field] = list(detail_creators)
        else:
            detail_updates[spec.creator_field] = []

    if spec.name_field:
        detail_updates[spec.name_field] = resource.title

    detail = resource.detail.model_copy(update=detail_updates, deep=True)
    return resource.model_copy(update={"creator": creator, "detail": detail}, deep=True)
