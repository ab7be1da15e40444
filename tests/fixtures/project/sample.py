import os
from collections import OrderedDict
from .base import BaseService


class UserService(BaseService):
    """Manages users."""

    def __init__(self, store, limit: int = 10):
        self.store = store
        self.limit = limit

    def get_user(self, user_id: int) -> dict:
        record = self.store.fetch(user_id)
        return normalize(record)


def normalize(record, *, strict=False):
    def clean(value):
        return value.strip()

    return {k: clean(v) for k, v in record.items()}


async def fetch_all(ids: list) -> list:
    return [await fetch_one(i) for i in ids]
