"""
Unit Tests — Name Normalizer & Mismatch Reconciler
==================================================
Covers:
    - Alias mapping and pass-through of unknown names
    - Idempotence of normalize()
    - Mismatch decision rules, including every "no evidence" path
"""
import pytest

from codeshield.language.normalizer import is_known_label, normalize
from codeshield.language.reconciler import reconcile
from codeshield.language.signatures import KNOWN_LABELS


JS_SNIPPET = "const x = 1; console.log(x);"
PY_SNIPPET = 'def greet(name):\n    print("hi", name)\n'


# ---------------------------------------------------------------------------
# 1. Normalizer
# ---------------------------------------------------------------------------
class TestNormalize:

    @pytest.mark.parametrize("raw,expected", [
        ("golang", "Go"),
        ("py", "Python"),
        ("js", "JavaScript"),
        ("Node.js", "JavaScript"),
        ("ts", "TypeScript"),
        ("csharp", "C#"),
        ("c#", "C#"),
        ("cpp", "C++"),
        ("kt", "Kotlin"),
        ("rb", "Ruby"),
        ("  PYTHON  ", "Python"),
        ("php", "PHP"),
    ])
    def test_aliases(self, raw, expected):
        assert normalize(raw) == expected

    def test_every_label_maps_to_itself(self):
        for label in KNOWN_LABELS:
            assert normalize(label) == label

    def test_unknown_passes_through_unchanged(self):
        assert normalize("Brainfuck") == "Brainfuck"
        assert normalize(" COBOL ") == " COBOL "

    @pytest.mark.parametrize("raw", ["golang", "JS", "Brainfuck", "", "  ", "c++", "Swift"])
    def test_idempotent(self, raw):
        assert normalize(normalize(raw)) == normalize(raw)

    def test_is_known_label(self):
        assert is_known_label("Go")
        assert not is_known_label("golang")


# ---------------------------------------------------------------------------
# 2. Reconciler
# ---------------------------------------------------------------------------
class TestReconcile:

    def test_javascript_declared_as_python(self):
        report = reconcile("Python", JS_SNIPPET)
        assert report is not None
        assert report.detected_label == "JavaScript"
        assert report.message == (
            "The code appears to be written in JavaScript, not Python. "
            "Please select JavaScript from the dropdown for more accurate analysis."
        )

    def test_declared_alias_is_normalized_in_message(self):
        report = reconcile("js", PY_SNIPPET)
        assert report.detected_label == "Python"
        assert "not JavaScript" in report.message

    @pytest.mark.parametrize("declared", [None, "", "   "])
    def test_absent_declaration_never_mismatches(self, declared):
        assert reconcile(declared, JS_SNIPPET) is None

    @pytest.mark.parametrize("snippet", [JS_SNIPPET, PY_SNIPPET, "hello world", ""])
    def test_unrecognized_declaration_never_mismatches(self, snippet):
        assert reconcile("Brainfuck", snippet) is None

    def test_no_classifier_evidence_never_mismatches(self):
        assert reconcile("Python", "hello world") is None

    @pytest.mark.parametrize("declared", ["JavaScript", "javascript", "js", "node"])
    def test_matching_language_is_clean(self, declared):
        assert reconcile(declared, JS_SNIPPET) is None

    def test_wire_names(self):
        dumped = reconcile("Python", JS_SNIPPET).model_dump(by_alias=True)
        assert set(dumped) == {"detected", "message"}
        assert dumped["detected"] == "JavaScript"
