"""Ruby analyzer: require/load, class/module, def and define_method."""

from __future__ import annotations

import re

from dep_crawler.extractor.base import BaseAnalyzer, split_default
from dep_crawler.models import Language, Parameter

_KEYWORD_ARG_RE = re.compile(r"^(?P<name>[A-Za-z_]\w*):\s*(?P<default>.*)$")


class RubyAnalyzer(BaseAnalyzer):
    language = Language.RUBY

    def parse_parameter(self, text: str) -> Parameter | None:
        """`name = default` or keyword `name: default`."""
        text = text.strip()
        kw = _KEYWORD_ARG_RE.match(text)
        if kw:
            return Parameter(name=kw.group("name"), default_value=kw.group("default").strip() or None)
        decl, default = split_default(text)
        return Parameter(name=decl, default_value=default)
