"""
Unit Tests — Result Assembler
=============================
Covers:
    - Defensive defaulting of untrusted model output
    - Classifier-owned mismatch reconciliation (model claims ignored)
    - Model fix precedence and gap filling
    - Fix synthesis fallback
    - AnalysisResult invariants and wire names
    - Determinism
"""
import pytest

from codeshield.core.constants import DEFAULT_EXPLANATION, DEFAULT_FIX_RATIONALE
from codeshield.models.analysis_result import AnalysisResult
from codeshield.models.language_mismatch import MismatchReport
from codeshield.models.security_issue import SecurityIssue, Severity
from codeshield.models.suggested_fix import SuggestedFix
from codeshield.remediation.templates import GENERIC_TEMPLATE
from codeshield.services.result_assembler import assemble


JS_SQL = 'const query = "SELECT * FROM users WHERE id = " + userId; db.query(query, cb);'
JS_PLAIN = "const x = 1; console.log(x);"


def _sql_payload(**extra):
    payload = {
        "issues": [{"title": "SQL Injection", "severity": "high", "description": "Query built by concatenation."}],
        "explanation": "User input reaches the query text.",
        "saferPractices": ["Use parameterized queries"],
    }
    payload.update(extra)
    return payload


# ---------------------------------------------------------------------------
# 1. Scenarios
# ---------------------------------------------------------------------------
class TestScenarios:

    def test_mismatch_suppresses_fix(self):
        model_fix = {"vulnerabilityName": "SQL Injection", "whyThisWorks": "x", "secureCode": "y"}
        result = assemble(_sql_payload(suggestedFix=model_fix), JS_PLAIN, "Python")
        assert result.language_mismatch is not None
        assert result.language_mismatch.detected_label == "JavaScript"
        assert result.suggested_fix is None
        assert len(result.issues) == 1

    def test_sql_fix_synthesized_from_snippet(self):
        result = assemble(_sql_payload(), JS_SQL, "JavaScript")
        assert result.language_mismatch is None
        fix = result.suggested_fix
        assert fix.vulnerable_fragment == '"SELECT * FROM users WHERE id = " + userId'
        assert fix.secure_fragment == '"SELECT * FROM users WHERE id = ?", [userId]'

    def test_no_issues_no_fix(self):
        result = assemble({"issues": [], "explanation": "Looks fine."}, JS_PLAIN, "JavaScript")
        assert result.suggested_fix is None
        assert result.language_mismatch is None
        assert result.explanation == "Looks fine."

    def test_unknown_class_rationale_only(self):
        payload = {"issues": [{"title": "Weak Cryptographic Hash", "severity": "low"}]}
        result = assemble(payload, JS_PLAIN, "JavaScript")
        fix = result.suggested_fix
        assert fix.rationale == GENERIC_TEMPLATE.rationale
        assert fix.vulnerable_fragment is None
        assert fix.secure_fragment is None


# ---------------------------------------------------------------------------
# 2. Mismatch reconciliation
# ---------------------------------------------------------------------------
class TestMismatchOwnership:

    def test_model_mismatch_claim_is_ignored(self):
        claim = {"detected": "Kotlin", "message": "Looks like Kotlin."}
        result = assemble(_sql_payload(languageMismatch=claim), JS_SQL, "JavaScript")
        assert result.language_mismatch is None
        assert result.suggested_fix is not None

    def test_no_declared_language_no_mismatch(self):
        result = assemble(_sql_payload(), JS_SQL, None)
        assert result.language_mismatch is None

    def test_unrecognized_declared_language_no_mismatch(self):
        result = assemble(_sql_payload(), JS_SQL, "Brainfuck")
        assert result.language_mismatch is None


# ---------------------------------------------------------------------------
# 3. Defensive defaulting
# ---------------------------------------------------------------------------
class TestDefaulting:

    @pytest.mark.parametrize("payload", [None, "garbage", 42, ["issues"], {}])
    def test_non_object_or_empty_payload(self, payload):
        result = assemble(payload, JS_PLAIN, None)
        assert result.issues == []
        assert result.explanation == DEFAULT_EXPLANATION
        assert result.safer_practices == []
        assert result.suggested_fix is None

    def test_malformed_issues_are_defaulted_or_dropped(self):
        payload = {"issues": [{"severity": "CRITICAL"}, "junk", {"title": "  ", "severity": "LOW", "description": 7}]}
        result = assemble(payload, JS_PLAIN, None)
        assert [i.title for i in result.issues] == ["Security Issue", "Security Issue"]
        assert [i.severity for i in result.issues] == [Severity.MEDIUM, Severity.LOW]
        assert result.issues[1].description == ""

    def test_non_list_issues(self):
        assert assemble({"issues": {"title": "x"}}, JS_PLAIN, None).issues == []

    def test_practices_keep_only_strings(self):
        result = assemble({"saferPractices": ["Use params", 3, "", None]}, JS_PLAIN, None)
        assert result.safer_practices == ["Use params"]

    def test_blank_explanation_is_defaulted(self):
        assert assemble({"explanation": "   "}, JS_PLAIN, None).explanation == DEFAULT_EXPLANATION


# ---------------------------------------------------------------------------
# 4. Model-supplied fixes
# ---------------------------------------------------------------------------
class TestModelFix:

    def test_model_fix_wins_and_gaps_are_filled(self):
        result = assemble(_sql_payload(suggestedFix={"secureCode": "db.query(q, [userId])"}), JS_SQL, "js")
        fix = result.suggested_fix
        assert fix.vulnerability_name == "SQL Injection"
        assert fix.rationale == DEFAULT_FIX_RATIONALE
        assert fix.secure_fragment == "db.query(q, [userId])"
        assert fix.vulnerable_fragment is None

    def test_missing_complete_code_gets_annotated_rewrite(self):
        model_fix = {"vulnerabilityName": "SQL Injection", "whyThisWorks": "Binds input."}
        fix = assemble(_sql_payload(suggestedFix=model_fix), JS_SQL, "JavaScript").suggested_fix
        assert fix.rationale == "Binds input."
        assert "// SECURITY FIX:" in fix.complete_annotated_code

    def test_rewrite_follows_issue_title_not_fix_name(self):
        model_fix = {"vulnerabilityName": "Unsafe query construction", "secureCode": "db.query(q, [userId])"}
        fix = assemble(_sql_payload(suggestedFix=model_fix), JS_SQL, "JavaScript").suggested_fix
        assert fix.vulnerability_name == "Unsafe query construction"
        assert fix.complete_annotated_code.startswith("// SECURITY FIX: Use a parameterized query")

    def test_no_rewrite_attached_for_c_source(self):
        c_sql = (
            "#include <stdio.h>\n"
            "int main(void) {\n"
            '    printf("SELECT * FROM users WHERE id = " + id);\n'
            "}\n"
        )
        model_fix = {"whyThisWorks": "Binds input.", "secureCode": "x"}
        fix = assemble(_sql_payload(suggestedFix=model_fix), c_sql, "C").suggested_fix
        assert fix.complete_annotated_code is None

    def test_model_complete_code_is_kept_verbatim(self):
        model_fix = {"whyThisWorks": "Binds input.", "completeFixedCode": "// fixed\nsafe();"}
        fix = assemble(_sql_payload(suggestedFix=model_fix), JS_SQL, "JavaScript").suggested_fix
        assert fix.complete_annotated_code == "// fixed\nsafe();"

    @pytest.mark.parametrize("raw_fix", [None, "fix it", {"vulnerabilityName": "  "}, {"other": "x"}])
    def test_malformed_model_fix_falls_back_to_synthesis(self, raw_fix):
        fix = assemble(_sql_payload(suggestedFix=raw_fix), JS_SQL, "JavaScript").suggested_fix
        assert fix.rationale.startswith("This fix uses a parameterized SQL query")

    def test_model_fix_without_issues_is_dropped(self):
        payload = {"issues": [], "suggestedFix": {"vulnerabilityName": "SQL Injection", "secureCode": "x"}}
        assert assemble(payload, JS_SQL, "JavaScript").suggested_fix is None


# ---------------------------------------------------------------------------
# 5. Invariants, wire format, determinism
# ---------------------------------------------------------------------------
class TestResultContract:

    def test_fix_with_mismatch_is_rejected(self):
        with pytest.raises(ValueError):
            AnalysisResult(
                issues=[SecurityIssue(title="SQL Injection")],
                explanation="x",
                suggested_fix=SuggestedFix(vulnerability_name="SQL Injection", rationale="r"),
                language_mismatch=MismatchReport(detected_label="Python", message="m"),
            )

    def test_fix_without_issues_is_rejected(self):
        with pytest.raises(ValueError):
            AnalysisResult(
                explanation="x",
                suggested_fix=SuggestedFix(vulnerability_name="SQL Injection", rationale="r"),
            )

    def test_wire_names(self):
        dumped = assemble(_sql_payload(), JS_SQL, "JavaScript").model_dump(by_alias=True, mode="json")
        assert set(dumped) == {"issues", "explanation", "saferPractices", "suggestedFix", "languageMismatch"}
        assert set(dumped["suggestedFix"]) == {
            "vulnerabilityName", "whyThisWorks", "vulnerableCode", "secureCode", "completeFixedCode",
        }
        assert dumped["issues"][0]["severity"] == "high"
        assert dumped["languageMismatch"] is None

    @pytest.mark.parametrize("snippet,declared", [
        (JS_SQL, "JavaScript"),
        (JS_PLAIN, "Python"),
        (JS_SQL, None),
    ])
    def test_same_input_same_output(self, snippet, declared):
        first = assemble(_sql_payload(), snippet, declared).model_dump_json(by_alias=True)
        second = assemble(_sql_payload(), snippet, declared).model_dump_json(by_alias=True)
        assert first == second
