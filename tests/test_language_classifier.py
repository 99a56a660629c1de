"""
Unit Tests — Language Signatures & Classifier
=============================================
Covers:
    - Signature registry shape and comment tokens
    - Scoring: presence counting and negative-pattern penalty
    - Verdicts for representative snippets
    - Tie-break by declaration order
    - "none" verdict when nothing scores
"""
import re

import pytest

from codeshield.core.constants import NO_LANGUAGE
from codeshield.language.classifier import (
    NEGATIVE_PATTERN_PENALTY,
    ClassificationVerdict,
    classify,
    score_languages,
    score_signature,
)
from codeshield.language.signatures import (
    KNOWN_LABELS,
    SIGNATURES,
    LanguageSignature,
    signature_for,
)


# ---------------------------------------------------------------------------
# 1. Signature registry
# ---------------------------------------------------------------------------
class TestSignatureRegistry:

    def test_thirteen_languages_registered(self):
        assert len(SIGNATURES) == 13

    def test_names_are_unique(self):
        names = [sig.name for sig in SIGNATURES]
        assert len(names) == len(set(names))

    def test_known_labels_match_registry(self):
        assert KNOWN_LABELS == {sig.name for sig in SIGNATURES}

    def test_declaration_order_starts_with_typescript_then_javascript(self):
        assert [sig.name for sig in SIGNATURES[:3]] == ["TypeScript", "JavaScript", "Python"]

    def test_hash_comment_languages(self):
        assert signature_for("Python").line_comment == "#"
        assert signature_for("Ruby").line_comment == "#"
        assert signature_for("Go").line_comment == "//"

    def test_unknown_label_has_no_signature(self):
        assert signature_for("COBOL") is None

    def test_signatures_are_immutable(self):
        with pytest.raises(Exception):
            SIGNATURES[0].name = "Changed"


# ---------------------------------------------------------------------------
# 2. Scoring
# ---------------------------------------------------------------------------
class TestScoring:

    def test_pattern_counts_once_regardless_of_repeats(self):
        sig = LanguageSignature(name="A", positive_patterns=(re.compile("foo"),))
        assert score_signature("foo foo foo", sig) == 1

    def test_negative_pattern_costs_penalty(self):
        sig = LanguageSignature(
            name="A",
            positive_patterns=(re.compile("foo"),),
            negative_patterns=(re.compile("bar"),),
        )
        assert score_signature("foo bar", sig) == 1 - NEGATIVE_PATTERN_PENALTY

    def test_penalty_constant_is_two(self):
        assert NEGATIVE_PATTERN_PENALTY == 2

    def test_score_languages_reports_every_language(self):
        scores = score_languages("const x = 1; console.log(x);")
        assert list(scores) == [sig.name for sig in SIGNATURES]
        assert scores["JavaScript"] == 2
        assert scores["Swift"] < 0


# ---------------------------------------------------------------------------
# 3. Verdicts
# ---------------------------------------------------------------------------
class TestClassify:

    def test_javascript_snippet(self):
        verdict = classify("const x = 1; console.log(x);")
        assert verdict == ClassificationVerdict(label="JavaScript", score=2)
        assert verdict.is_known

    def test_python_snippet(self):
        verdict = classify('def greet(name):\n    print("hi", name)\n')
        assert verdict.label == "Python"
        assert verdict.score == 3

    def test_go_snippet(self):
        code = 'package main\n\nimport "fmt"\n\nfunc main() {\n\tfmt.Println("hi")\n}\n'
        assert classify(code).label == "Go"

    def test_php_snippet(self):
        code = "<?php\n$name = $_GET['name'];\necho \"Hello \" . $name;\n"
        assert classify(code).label == "PHP"

    def test_plain_text_is_none(self):
        verdict = classify("hello world")
        assert verdict.label == NO_LANGUAGE
        assert verdict.score == 0
        assert not verdict.is_known

    def test_empty_snippet_is_none(self):
        assert classify("") == ClassificationVerdict(label=NO_LANGUAGE, score=0)

    def test_same_input_same_verdict(self):
        code = 'const query = "SELECT * FROM users WHERE id = " + userId; db.query(query, cb);'
        assert classify(code) == classify(code)


# ---------------------------------------------------------------------------
# 4. Tie-break
# ---------------------------------------------------------------------------
class TestTieBreak:

    def test_python_beats_swift_on_equal_score(self):
        # print( scores 1 for both Python and Swift
        scores = score_languages("print(x)")
        assert scores["Python"] == scores["Swift"] == 1
        assert classify("print(x)").label == "Python"

    def test_javascript_beats_php_on_equal_score(self):
        scores = score_languages("function f() {}")
        assert scores["JavaScript"] == scores["PHP"] == 1
        assert classify("function f() {}").label == "JavaScript"

    def test_first_registered_wins_in_custom_table(self):
        first = LanguageSignature(name="First", positive_patterns=(re.compile("x"),))
        second = LanguageSignature(name="Second", positive_patterns=(re.compile("x"),))
        assert classify("x", signatures=(first, second)).label == "First"
        assert classify("x", signatures=(second, first)).label == "Second"

    def test_negative_only_table_yields_none(self):
        sig = LanguageSignature(
            name="Neg",
            positive_patterns=(re.compile("a"),),
            negative_patterns=(re.compile("b"),),
        )
        assert classify("ab", signatures=(sig,)).label == NO_LANGUAGE
