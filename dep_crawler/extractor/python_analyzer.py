"""Python analyzer: import/from, class, def (including async def)."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer, parse_colon_parameter
from dep_crawler.models import Language, Parameter


class PythonAnalyzer(BaseAnalyzer):
    language = Language.PYTHON

    def parse_parameter(self, text: str) -> Parameter | None:
        # bare `*` and `/` only separate keyword-only and positional-only params
        if text.strip() in ("*", "/"):
            return None
        return parse_colon_parameter(text)
