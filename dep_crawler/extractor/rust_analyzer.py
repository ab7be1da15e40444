"""Rust analyzer: use/mod/extern crate, struct/enum/trait/impl, fn."""

from __future__ import annotations

from dep_crawler.extractor.base import BaseAnalyzer, parse_colon_parameter
from dep_crawler.models import Language, Parameter


class RustAnalyzer(BaseAnalyzer):
    language = Language.RUST

    def parse_parameter(self, text: str) -> Parameter | None:
        text = text.strip()
        if text.startswith("mut "):
            text = text[4:]
        if text.lstrip("&").replace("mut ", "").strip() == "self":
            return Parameter(name="self", type=text.replace("self", "").strip())
        return parse_colon_parameter(text)
