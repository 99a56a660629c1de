"""
Language Signatures
===================
Static registry of per-language regex signatures used by the classifier.

Each entry holds:
    positive_patterns — syntax strongly indicative of the language
    negative_patterns — syntax that rules the language out
    line_comment      — single-line comment token (used for fix markers)

Declaration Order:
    Order does not change any language's score, but it IS the tie-break:
    when two languages score equally the earlier entry wins. Append new
    languages at the end unless you intend to change tie-break behaviour.

This module holds data only. No runtime mutation.
"""
import re
from dataclasses import dataclass
from typing import Optional


# ---------------------------------------------------------------------------
# Signature Entry
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class LanguageSignature:
    """Immutable signature set for one programming language."""
    name: str
    positive_patterns: tuple[re.Pattern, ...]
    negative_patterns: tuple[re.Pattern, ...] = ()
    line_comment: str = "//"


def _compile(*patterns: str, flags: int = 0) -> tuple[re.Pattern, ...]:
    return tuple(re.compile(p, flags) for p in patterns)


# ---------------------------------------------------------------------------
# Registry (declaration order = tie-break order)
# ---------------------------------------------------------------------------
SIGNATURES: tuple[LanguageSignature, ...] = (
    LanguageSignature(
        name="TypeScript",
        positive_patterns=_compile(
            r":\s*(string|number|boolean|any|void|never)\b",
            r"interface\s+\w+\s*\{",
            r"type\s+\w+\s*=",
            r"<\w+>",                                  # generics
            r"as\s+(string|number|boolean|any)",
        ),
        negative_patterns=_compile(r"^#include", flags=re.M),
    ),
    LanguageSignature(
        name="JavaScript",
        positive_patterns=_compile(
            r"\bconst\s+\w+\s*=",
            r"\blet\s+\w+\s*=",
            r"\bvar\s+\w+\s*=",
            r"=>\s*\{",                                # arrow functions
            r"console\.(log|error|warn)",
            r"function\s+\w+\s*\(",
            r"document\.(getElementById|querySelector)",
            r"window\.",
            r"\.forEach\s*\(",
            r"\.map\s*\(",
            r"\.filter\s*\(",
            r"require\s*\(",
            r"module\.exports",
            r"export\s+(default|const|function)",
            r"import\s+.*\s+from\s+['\"]",
        ),
        negative_patterns=(
            re.compile(r":\s*(string|number|boolean)\b"),
            re.compile(r"^package\s+\w+", re.M),
        ),
    ),
    LanguageSignature(
        name="Python",
        positive_patterns=(
            re.compile(r"^def\s+\w+\s*\(", re.M),
            re.compile(r"^class\s+\w+.*:", re.M),
            re.compile(r"^import\s+\w+", re.M),
            re.compile(r"^from\s+\w+\s+import", re.M),
            re.compile(r"print\s*\("),
            re.compile(r"if\s+__name__\s*==\s*['\"]__main__['\"]"),
            re.compile(r"self\."),
            re.compile(r":\s*$", re.M),                # trailing block colon
            re.compile(r"^\s+pass\s*$", re.M),
            re.compile(r"elif\s+"),
        ),
        line_comment="#",
    ),
    LanguageSignature(
        name="Kotlin",
        positive_patterns=_compile(
            r"\bfun\s+\w+\s*\(",
            r"\bval\s+\w+",
            r"\bvar\s+\w+",
            r"println\s*\(",
            r"package\s+\w+(\.\w+)*",
            r":\s*\w+\s*\?",                           # nullable types
            r"when\s*\{",
            r"data\s+class",
            r"companion\s+object",
        ),
    ),
    LanguageSignature(
        name="Java",
        positive_patterns=_compile(
            r"public\s+(static\s+)?void\s+main",
            r"public\s+class\s+\w+",
            r"private\s+(final\s+)?\w+\s+\w+",
            r"System\.out\.println",
            r"new\s+\w+\s*\(",
            r"@Override",
            r"extends\s+\w+",
            r"implements\s+\w+",
        ),
        negative_patterns=_compile(
            r"\bfun\s+",
            r"\bval\s+",
            r"\bvar\s+\w+\s*:",
        ),
    ),
    LanguageSignature(
        name="C#",
        positive_patterns=_compile(
            r"using\s+System",
            r"namespace\s+\w+",
            r"public\s+class\s+\w+",
            r"Console\.(WriteLine|ReadLine)",
            r"static\s+void\s+Main",
            r"\[\w+\]",                                # attributes
            r"async\s+Task",
            r"await\s+",
        ),
    ),
    LanguageSignature(
        name="C++",
        positive_patterns=_compile(
            r"#include\s*<\w+>",
            r"std::",
            r"cout\s*<<",
            r"cin\s*>>",
            r"int\s+main\s*\(",
            r"nullptr",
            r"::\w+",
            r"template\s*<",
        ),
    ),
    LanguageSignature(
        name="C",
        positive_patterns=_compile(
            r"#include\s*<stdio\.h>",
            r"#include\s*<stdlib\.h>",
            r"printf\s*\(",
            r"scanf\s*\(",
            r"int\s+main\s*\(",
            r"malloc\s*\(",
            r"free\s*\(",
        ),
        negative_patterns=_compile(
            r"std::",
            r"cout",
            r"cin",
            r"class\s+\w+",
        ),
    ),
    LanguageSignature(
        name="Go",
        positive_patterns=(
            re.compile(r"^package\s+main", re.M),
            re.compile(r"func\s+\w+\s*\("),
            re.compile(r"fmt\.(Print|Println|Printf)"),
            re.compile(r":=\s*"),
            re.compile(r"import\s*\("),
            re.compile(r"go\s+func"),
            re.compile(r"chan\s+\w+"),
        ),
    ),
    LanguageSignature(
        name="Rust",
        positive_patterns=_compile(
            r"fn\s+\w+\s*\(",
            r"let\s+mut\s+",
            r"println!\s*\(",
            r"impl\s+\w+",
            r"pub\s+fn",
            r"use\s+std::",
            r"->.*\{",
            r"&mut\s+",
        ),
    ),
    LanguageSignature(
        name="Ruby",
        positive_patterns=(
            re.compile(r"^def\s+\w+", re.M),
            re.compile(r"^end\s*$", re.M),
            re.compile(r"puts\s+"),
            re.compile(r"\.each\s+do"),
            re.compile(r"require\s+['\"]"),
            re.compile(r"attr_(accessor|reader|writer)"),
            re.compile(r"class\s+\w+\s*<"),
        ),
        # Python defs carry parentheses
        negative_patterns=_compile(r"^def\s+\w+\s*\(", flags=re.M),
        line_comment="#",
    ),
    LanguageSignature(
        name="PHP",
        positive_patterns=_compile(
            r"<\?php",
            r"\$\w+\s*=",
            r"echo\s+",
            r"function\s+\w+\s*\(",
            r"->(\w+)",
            r"::",
        ),
    ),
    LanguageSignature(
        name="Swift",
        positive_patterns=_compile(
            r"\bfunc\s+\w+\s*\(",
            r"\bvar\s+\w+\s*:",
            r"\blet\s+\w+\s*:",
            r"print\s*\(",
            r"guard\s+let",
            r"if\s+let",
            r"@IBOutlet",
            r"@IBAction",
        ),
        negative_patterns=_compile(r"console\.log", r"println\("),
    ),
)


# Authoritative label vocabulary shared with the normalizer.
KNOWN_LABELS: frozenset[str] = frozenset(sig.name for sig in SIGNATURES)

_BY_NAME: dict[str, LanguageSignature] = {sig.name: sig for sig in SIGNATURES}


def signature_for(label: str) -> Optional[LanguageSignature]:
    """Return the signature entry for a canonical label, or None."""
    return _BY_NAME.get(label)
