from __future__ import annotations

from typing import List

from devconnect.domain import exceptions, model
from devconnect.service_layer import unit_of_work


def list_posts(uow: unit_of_work.AbstractUnitOfWork) -> List[model.PostAggregate]:
    with uow:
        return list(uow.posts.list_all())


def get_post(uow: unit_of_work.AbstractUnitOfWork, post_id: int) -> model.PostAggregate:
    with uow:
        post = uow.posts.get(post_id)
    if not post:
        raise exceptions.PostNotFound(f"Post {post_id} not found")
    return post
