"""JavaScript and TypeScript analyzer."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer, parse_colon_parameter
from dep_crawler.models import Language, Parameter


class JavaScriptAnalyzer(BaseAnalyzer):
    language = Language.JAVASCRIPT_FAMILY

    def parse_parameter(self, text: str) -> Parameter | None:
        param = parse_colon_parameter(text)
        if param.name.endswith("?"):
            # optional TypeScript parameter
            param.name = param.name[:-1]
        return param
