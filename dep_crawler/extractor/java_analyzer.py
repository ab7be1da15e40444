"""Java analyzer: import/package, class/interface/enum/record, methods."""

from __future__ import annotations

import re

from dep_crawler.extractor.base import BaseAnalyzer, split_default, split_type_and_name
from dep_crawler.models import Language, Parameter

_ANNOTATION_RE = re.compile(r"@\w+(?:\([^)]*\))?\s*")


class JavaAnalyzer(BaseAnalyzer):
    language = Language.JAVA
    return_type_modifiers = frozenset({
        "public", "private", "protected", "static", "final", "abstract",
        "synchronized", "native", "default",
    })

    def parse_parameter(self, text: str) -> Parameter | None:
        decl, default = split_default(_ANNOTATION_RE.sub("", text))
        if decl.startswith("final "):
            decl = decl[6:]
        type_text, name = split_type_and_name(decl)
        return Parameter(name=name, type=type_text, default_value=default)
