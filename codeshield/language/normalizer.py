"""
Language Name Normalizer
========================
Canonicalises free-text language names ("js", "golang", " Python ") to the
labels used by the signature table so that user input and classifier output
are comparable.

Unknown names pass through unchanged. They are never an error.
"""
from codeshield.language.signatures import KNOWN_LABELS


# Lowercased alias → canonical label
_ALIASES: dict[str, str] = {
    "javascript": "JavaScript",
    "js":         "JavaScript",
    "node":       "JavaScript",
    "nodejs":     "JavaScript",
    "node.js":    "JavaScript",
    "typescript": "TypeScript",
    "ts":         "TypeScript",
    "python":     "Python",
    "py":         "Python",
    "python3":    "Python",
    "kotlin":     "Kotlin",
    "kt":         "Kotlin",
    "java":       "Java",
    "c#":         "C#",
    "csharp":     "C#",
    "cs":         "C#",
    "c++":        "C++",
    "cpp":        "C++",
    "c":          "C",
    "go":         "Go",
    "golang":     "Go",
    "rust":       "Rust",
    "rs":         "Rust",
    "ruby":       "Ruby",
    "rb":         "Ruby",
    "php":        "PHP",
    "swift":      "Swift",
}


def normalize(raw: str) -> str:
    """
    Map a free-text language name to its canonical label.

    Parameters
    ----------
    raw : str
        User-supplied language name.

    Returns
    -------
    str
        Canonical label (e.g. "Go" for "golang"), or ``raw`` unchanged when
        the name is not recognised.
    """
    return _ALIASES.get(raw.strip().lower(), raw)


def is_known_label(label: str) -> bool:
    """True if ``label`` is a canonical label from the signature table."""
    return label in KNOWN_LABELS
