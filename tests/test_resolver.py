"""Tests for structure provenance stamping."""

from dep_crawler.extractor import get_analyzer
from dep_crawler.models import Language, Structure
from dep_crawler.patterns import PatternLibrary
from dep_crawler.resolver import resolve_structures

TEXT = "from shapes import Base\n\nclass Square(Base):\n    pass\n"


def test_stamps_structure_with_module_file():
    library = PatternLibrary()
    analyzer = get_analyzer(Language.PYTHON)
    structure = Structure(name="Square", kind="class", dependencies="shapes.Base")
    assert resolve_structures([structure], "a.ext", TEXT, library, analyzer) == 1
    assert structure.dependencies == "a.ext:shapes.Base"
    assert structure.provenance == "a.ext"


def test_unmatched_structure_is_untouched():
    library = PatternLibrary()
    analyzer = get_analyzer(Language.PYTHON)
    structure = Structure(name="Square", kind="class", dependencies="Base")
    assert resolve_structures([structure], "a.ext", TEXT, library, analyzer) == 0
    assert structure.dependencies == "Base"
    assert structure.provenance is None


def test_structure_is_stamped_once():
    library = PatternLibrary()
    analyzer = get_analyzer(Language.RUST)
    text = "use Base;\nuse Base;\n"
    structure = Structure(name="Derived", kind="trait", dependencies="Base")
    assert resolve_structures([structure], "a.ext", text, library, analyzer) == 1
    assert resolve_structures([structure], "a.ext", text, library, analyzer) == 0
    assert structure.dependencies == "a.ext:Base"


def test_structures_without_dependencies_are_skipped():
    library = PatternLibrary()
    analyzer = get_analyzer(Language.RUST)
    structure = Structure(name="Plain", kind="struct")
    assert resolve_structures([structure], "a.ext", "use Base;\n", library, analyzer) == 0
    assert structure.dependencies is None
