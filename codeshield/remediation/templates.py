"""
Fix Templates
=============
One template per vulnerability class. Each template is a fixed rule set:

    keywords      — lowercase cues tested against the issue title
    rationale     — fixed, class-specific explanation (never regenerated)
    extract       — pulls the offending fragment out of the snippet and
                    builds its secure counterpart
    illustrative  — generic fragment pair used when extraction finds nothing
    rewrite       — applies the same substitution in place across the whole
                    snippet, with a SECURITY FIX marker before every change

Template Order (first keyword match wins):
    1. SQL injection      — "sql", "injection"
    2. Cross-site scripting — "xss", "cross-site", "reflected"
    3. Command injection  — "command", "exec", "os"
    4. Path traversal     — "path", "traversal", "directory"

    Consequences: "Command Injection" selects SQL injection ("injection"),
    and a title mixing path and command cues selects command injection.

The generic template sits outside the ordered list. It carries a rationale
only and never fabricates code.

Rewrites are line-based and approximate. They never add a declaration the
rewritten code does not use, and every added declaration carries a marker.
Only Python, PHP and JavaScript (TypeScript and unplaced code included) are
extracted and rewritten. Any other language gets the illustrative JavaScript
pair and no rewrite.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from codeshield.core.constants import NO_LANGUAGE
from codeshield.core.output_formatter import format_marker
from codeshield.language.signatures import signature_for


# ---------------------------------------------------------------------------
# Types
# ---------------------------------------------------------------------------
class VulnClass(str, Enum):
    SQL_INJECTION = "sql_injection"
    XSS = "xss"
    COMMAND_INJECTION = "command_injection"
    PATH_TRAVERSAL = "path_traversal"
    GENERIC = "generic"


class Dialect(str, Enum):
    """Syntax family used to render secure code."""
    PYTHON = "python"
    PHP = "php"
    JAVASCRIPT = "javascript"
    # no guard vocabulary; only the illustrative JavaScript pair is shown
    OTHER = "other"


# JavaScript rendering also covers code the classifier could not place
_JAVASCRIPT_LABELS = frozenset({"JavaScript", "TypeScript", NO_LANGUAGE})


@dataclass(frozen=True)
class RewriteContext:
    """Per-snippet rendering settings derived from the classifier verdict."""
    dialect: Dialect
    comment: str

    @classmethod
    def for_language(cls, label: str) -> "RewriteContext":
        signature = signature_for(label)
        comment = signature.line_comment if signature else "//"
        if label == "Python":
            return cls(Dialect.PYTHON, comment)
        if label == "PHP":
            return cls(Dialect.PHP, comment)
        if label in _JAVASCRIPT_LABELS:
            return cls(Dialect.JAVASCRIPT, comment)
        return cls(Dialect.OTHER, comment)

    @property
    def renders_snippet(self) -> bool:
        """True when extraction and rewrites can be expressed in this dialect."""
        return self.dialect is not Dialect.OTHER


FragmentPair = tuple[str, str]

# (rewritten line, guard lines to insert above it, marker note)
LineEdit = tuple[str, list[str], str]


@dataclass(frozen=True)
class FixTemplate:
    vuln_class: VulnClass
    keywords: tuple[str, ...]
    rationale: str
    extract: Optional[Callable[[str, RewriteContext], Optional[FragmentPair]]] = None
    illustrative: Optional[Callable[[RewriteContext], FragmentPair]] = None
    rewrite: Optional[Callable[[str, RewriteContext], str]] = None

    def matches(self, title: str) -> bool:
        lowered = title.lower()
        return any(keyword in lowered for keyword in self.keywords)


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
# Bare or dotted variable reference, optionally PHP-style ($name)
_IDENT = r"\$?[A-Za-z_]\w*(?:\.[A-Za-z_]\w*)*"

_INDENT_RE = re.compile(r"^[ \t]*")


def _indent_of(line: str) -> str:
    return _INDENT_RE.match(line).group(0)


def _step(ctx: RewriteContext) -> str:
    return "    " if ctx.dialect in (Dialect.PYTHON, Dialect.PHP) else "  "


def _call_text(text: str, match: re.Match) -> str:
    """
    Return the call starting at ``match`` up to its closing parenthesis on the
    same line, including a statement terminator that directly follows it.
    """
    open_idx = text.index("(", match.end("call"))
    end = text.find("\n", open_idx)
    if end == -1:
        end = len(text)
    depth = 0
    for idx in range(open_idx, end):
        if text[idx] == "(":
            depth += 1
        elif text[idx] == ")":
            depth -= 1
            if depth == 0:
                if text[idx + 1:idx + 2] == ";":
                    idx += 1
                return text[match.start():idx + 1]
    return text[match.start():end].rstrip()


def _replace_group(text: str, match: re.Match, group: str, replacement: str) -> str:
    """Replace one named group of ``match`` inside ``text`` (``text`` starts at match.start())."""
    start = match.start(group) - match.start()
    end = match.end(group) - match.start()
    return text[:start] + replacement + text[end:]


def _rewrite_lines(
    snippet: str,
    ctx: RewriteContext,
    edit_line: Callable[[str], Optional[LineEdit]],
) -> str:
    """Apply ``edit_line`` to every line, inserting a marker (and guards) above each change."""
    out: list[str] = []
    for line in snippet.split("\n"):
        edit = edit_line(line)
        if edit is None:
            out.append(line)
            continue
        new_line, guard, note = edit
        indent = _indent_of(line)
        out.append(format_marker(ctx.comment, note, indent))
        out.extend(indent + g for g in guard)
        out.append(new_line)
    return "\n".join(out)


def _insert_preamble(text: str, ctx: RewriteContext, declarations: list[tuple[str, str]]) -> str:
    """Insert support declarations at the top, after any shebang or ``<?php`` opener."""
    if not declarations:
        return text
    lines = text.split("\n")
    at = 1 if lines and lines[0].lstrip().startswith(("#!", "<?php")) else 0
    block: list[str] = []
    for note, declaration in declarations:
        block.append(format_marker(ctx.comment, note))
        block.append(declaration)
    block.append("")
    return "\n".join(lines[:at] + block + lines[at:])


# ---------------------------------------------------------------------------
# 1. SQL injection
# ---------------------------------------------------------------------------
_SQL_LITERAL = r"(?P<q>[\"'`])(?P<query>\s*(?:SELECT|INSERT|UPDATE|DELETE)\b[^\"'`]*)(?P=q)"

# A single bound value only: no further concatenation may follow the parameter
_SQL_CONCAT_RE = re.compile(_SQL_LITERAL + r"\s*\+\s*(?P<param>" + _IDENT + r")(?![\w.(])(?!\s*\+)", re.I)
_SQL_CONCAT_PHP_RE = re.compile(_SQL_LITERAL + r"\s*\.\s*(?P<param>\$[A-Za-z_]\w*)(?![\w(])(?!\s*\.)", re.I)

# "<name> =" immediately before the query literal
_ASSIGN_TAIL_RE = re.compile(r"(?P<var>\$?[A-Za-z_]\w*)\s*=\s*$")

_SQL_CALL_RE = re.compile(
    r"(?P<head>(?:\.|->)(?:query|execute)\s*\(\s*)(?P<var>\$?[A-Za-z_]\w*)(?P<after>\s*[,)])"
)


def _sql_concat_re(ctx: RewriteContext) -> re.Pattern:
    return _SQL_CONCAT_PHP_RE if ctx.dialect is Dialect.PHP else _SQL_CONCAT_RE


def _sql_binding(param: str, ctx: RewriteContext) -> tuple[str, str]:
    """Return (placeholder, parameter list) for the dialect's driver convention."""
    if ctx.dialect is Dialect.PYTHON:
        return "%s", f"({param},)"
    return "?", f"[{param}]"


def _parameterized_literal(match: re.Match, placeholder: str) -> str:
    q = match.group("q")
    return f"{q}{match.group('query')}{placeholder}{q}"


def extract_sql(snippet: str, ctx: RewriteContext) -> Optional[FragmentPair]:
    match = _sql_concat_re(ctx).search(snippet)
    if match is None:
        return None
    placeholder, params = _sql_binding(match.group("param"), ctx)
    return match.group(0), f"{_parameterized_literal(match, placeholder)}, {params}"


def illustrative_sql(ctx: RewriteContext) -> FragmentPair:
    if ctx.dialect is Dialect.PYTHON:
        return (
            'query = "SELECT * FROM users WHERE id = " + user_id\n'
            "cursor.execute(query)",
            'query = "SELECT * FROM users WHERE id = %s"\n'
            "cursor.execute(query, (user_id,))",
        )
    if ctx.dialect is Dialect.PHP:
        return (
            '$query = "SELECT * FROM users WHERE id = " . $userId;\n'
            "$result = $db->query($query);",
            '$stmt = $db->prepare("SELECT * FROM users WHERE id = ?");\n'
            "$stmt->execute([$userId]);",
        )
    return (
        'const query = "SELECT * FROM users WHERE id = " + userId;\n'
        "db.query(query, callback);",
        'const query = "SELECT * FROM users WHERE id = ?";\n'
        "db.query(query, [userId], callback);",
    )


def rewrite_sql(snippet: str, ctx: RewriteContext) -> str:
    concat_re = _sql_concat_re(ctx)
    # query variable → parameter list, filled as assignments are rewritten
    bindings: dict[str, str] = {}

    def edit(line: str) -> Optional[LineEdit]:
        notes: list[str] = []

        def parameterize(match: re.Match) -> str:
            placeholder, params = _sql_binding(match.group("param"), ctx)
            literal = _parameterized_literal(match, placeholder)
            if not notes:
                notes.append("Use a parameterized query to prevent SQL injection")
            assigned = _ASSIGN_TAIL_RE.search(line[:match.start()])
            if assigned:
                bindings[assigned.group("var")] = params
                return literal
            return f"{literal}, {params}"

        new_line = concat_re.sub(parameterize, line)

        def bind(match: re.Match) -> str:
            var = match.group("var")
            if var not in bindings:
                return match.group(0)
            notes.append(f"Bind {bindings[var].strip('[](),')} as a query parameter")
            params = bindings.pop(var)
            return f"{match.group('head')}{var}, {params}{match.group('after').strip()}"

        new_line = _SQL_CALL_RE.sub(bind, new_line)
        if not notes:
            return None
        return new_line, [], "; ".join(notes)

    return _rewrite_lines(snippet, ctx, edit)


# ---------------------------------------------------------------------------
# 2. Cross-site scripting
# ---------------------------------------------------------------------------
_XSS_CALL_RE = re.compile(
    r"(?P<call>\b(?:res\.(?:send|write|end)|response\.write|document\.write"
    r"|make_response|HttpResponse|Response))\s*\(\s*"
    r"(?P<q>[\"'`])(?P<text>[^\"'`\n]*)(?P=q)\s*\+\s*(?P<var>" + _IDENT + ")"
)
_XSS_ECHO_RE = re.compile(
    r"(?P<call>\becho)\s+(?P<q>[\"'])(?P<text>[^\"'\n]*)(?P=q)\s*\.\s*(?P<var>\$[A-Za-z_]\w*)"
)


def _escape(var: str, ctx: RewriteContext) -> str:
    if ctx.dialect is Dialect.PYTHON:
        return f"html.escape({var})"
    if ctx.dialect is Dialect.PHP:
        return f"htmlspecialchars({var}, ENT_QUOTES, 'UTF-8')"
    return f"escapeHtml({var})"


def _xss_matches(text: str) -> list[re.Match]:
    found = list(_XSS_CALL_RE.finditer(text)) + list(_XSS_ECHO_RE.finditer(text))
    return sorted(found, key=lambda m: m.start())


def _xss_vulnerable_text(text: str, match: re.Match) -> str:
    if match.group("call") == "echo":
        end = text.find(";", match.end())
        newline = text.find("\n", match.end())
        if end == -1 or (newline != -1 and newline < end):
            return text[match.start():newline if newline != -1 else len(text)].rstrip()
        return text[match.start():end + 1]
    return _call_text(text, match)


def extract_xss(snippet: str, ctx: RewriteContext) -> Optional[FragmentPair]:
    matches = _xss_matches(snippet)
    if not matches:
        return None
    match = matches[0]
    vulnerable = _xss_vulnerable_text(snippet, match)
    secure = _replace_group(vulnerable, match, "var", _escape(match.group("var"), ctx))
    return vulnerable, secure


def illustrative_xss(ctx: RewriteContext) -> FragmentPair:
    if ctx.dialect is Dialect.PYTHON:
        return 'return make_response("Hello " + name)', 'return make_response("Hello " + html.escape(name))'
    if ctx.dialect is Dialect.PHP:
        return 'echo "Hello " . $name;', "echo \"Hello \" . htmlspecialchars($name, ENT_QUOTES, 'UTF-8');"
    return 'res.send("Hello " + name);', 'res.send("Hello " + escapeHtml(name));'


def _xss_declarations(snippet: str, ctx: RewriteContext) -> list[tuple[str, str]]:
    if ctx.dialect is Dialect.PYTHON:
        if re.search(r"^\s*import\s+html\b", snippet, re.M):
            return []
        return [("Import HTML escaping helper", "import html")]
    if ctx.dialect is Dialect.PHP or "escape-html" in snippet or "escapeHtml =" in snippet:
        return []
    if re.search(r"\brequire\s*\(", snippet):
        return [("Import HTML escaping helper", 'const escapeHtml = require("escape-html");')]
    return [("Import HTML escaping helper", 'import escapeHtml from "escape-html";')]


def rewrite_xss(snippet: str, ctx: RewriteContext) -> str:
    changed = False

    def edit(line: str) -> Optional[LineEdit]:
        nonlocal changed
        matches = _xss_matches(line)
        if not matches:
            return None
        new_line = line
        # right to left keeps earlier offsets valid
        for match in reversed(matches):
            start, end = match.span("var")
            new_line = new_line[:start] + _escape(match.group("var"), ctx) + new_line[end:]
        changed = True
        names = ", ".join(dict.fromkeys(m.group("var") for m in matches))
        return new_line, [], f"Escape {names} before writing it to the response"

    rewritten = _rewrite_lines(snippet, ctx, edit)
    if not changed:
        return snippet
    return _insert_preamble(rewritten, ctx, _xss_declarations(snippet, ctx))


# ---------------------------------------------------------------------------
# 3. Command injection
# ---------------------------------------------------------------------------
_COMMAND_CALL_RE = re.compile(
    r"(?P<call>\b(?:[A-Za-z_$][\w$]*\.)*(?:execSync|exec|spawnSync|spawn|system|popen|Popen"
    r"|check_output|check_call|shell_exec|passthru))"
    r"\s*\(\s*(?P<var>" + _IDENT + r")\s*(?=[,)])"
)


def _command_guard(var: str, ctx: RewriteContext) -> list[str]:
    step = _step(ctx)
    if ctx.dialect is Dialect.PYTHON:
        return [
            'ALLOWED_COMMANDS = {"list", "status", "info"}',
            f"if {var} not in ALLOWED_COMMANDS:",
            f'{step}raise ValueError("Command not allowed")',
        ]
    if ctx.dialect is Dialect.PHP:
        return [
            '$allowedCommands = ["list", "status", "info"];',
            f"if (!in_array({var}, $allowedCommands, true)) {{",
            f'{step}throw new InvalidArgumentException("Command not allowed");',
            "}",
        ]
    return [
        'const allowedCommands = ["list", "status", "info"];',
        f"if (!allowedCommands.includes({var})) {{",
        f'{step}throw new Error("Command not allowed");',
        "}",
    ]


def extract_command(snippet: str, ctx: RewriteContext) -> Optional[FragmentPair]:
    match = _COMMAND_CALL_RE.search(snippet)
    if match is None:
        return None
    invocation = _call_text(snippet, match)
    return invocation, "\n".join(_command_guard(match.group("var"), ctx) + [invocation])


def illustrative_command(ctx: RewriteContext) -> FragmentPair:
    if ctx.dialect is Dialect.PYTHON:
        invocation = "os.system(user_command)"
        var = "user_command"
    elif ctx.dialect is Dialect.PHP:
        invocation = "shell_exec($userCommand);"
        var = "$userCommand"
    else:
        invocation = "exec(userCommand);"
        var = "userCommand"
    return invocation, "\n".join(_command_guard(var, ctx) + [invocation])


def rewrite_command(snippet: str, ctx: RewriteContext) -> str:
    def edit(line: str) -> Optional[LineEdit]:
        variables = list(dict.fromkeys(m.group("var") for m in _COMMAND_CALL_RE.finditer(line)))
        if not variables:
            return None
        guard: list[str] = []
        for var in variables:
            guard.extend(_command_guard(var, ctx))
        return line, guard, f"Allow-list {', '.join(variables)} before executing it"

    return _rewrite_lines(snippet, ctx, edit)


# ---------------------------------------------------------------------------
# 4. Path traversal
# ---------------------------------------------------------------------------
_PATH_CALL_RE = re.compile(
    r"(?P<call>\b(?:[A-Za-z_$][\w$]*\.)*(?:readFileSync|readFile|writeFileSync|writeFile"
    r"|appendFileSync|appendFile|unlinkSync|unlink|readdirSync|readdir|createReadStream"
    r"|sendFile|send_file|open|fopen|file_get_contents|readfile))"
    r"\s*\(\s*(?P<var>" + _IDENT + r")\s*(?=[,)])"
)

_BASE_DIR_LITERAL = '"/safe/base/directory"'


def _safe_name(ctx: RewriteContext) -> str:
    if ctx.dialect is Dialect.PYTHON:
        return "safe_path"
    if ctx.dialect is Dialect.PHP:
        return "$safePath"
    return "safePath"


def _path_guard(var: str, ctx: RewriteContext) -> list[str]:
    step = _step(ctx)
    if ctx.dialect is Dialect.PYTHON:
        return [
            f"safe_path = os.path.realpath(os.path.join(BASE_DIR, {var}))",
            "if os.path.commonpath([BASE_DIR, safe_path]) != BASE_DIR:",
            f'{step}raise PermissionError("Access denied: path traversal detected")',
        ]
    if ctx.dialect is Dialect.PHP:
        return [
            f"$safePath = realpath(BASE_DIR . DIRECTORY_SEPARATOR . {var});",
            "if ($safePath === false || strpos($safePath, BASE_DIR . DIRECTORY_SEPARATOR) !== 0) {",
            f'{step}throw new RuntimeException("Access denied: path traversal detected");',
            "}",
        ]
    return [
        f"const safePath = path.resolve(BASE_DIR, {var});",
        "if (!safePath.startsWith(BASE_DIR + path.sep)) {",
        f'{step}throw new Error("Access denied: path traversal detected");',
        "}",
    ]


def extract_path(snippet: str, ctx: RewriteContext) -> Optional[FragmentPair]:
    match = _PATH_CALL_RE.search(snippet)
    if match is None:
        return None
    invocation = _call_text(snippet, match)
    safe_call = _replace_group(invocation, match, "var", _safe_name(ctx))
    return invocation, "\n".join(_path_guard(match.group("var"), ctx) + [safe_call])


def illustrative_path(ctx: RewriteContext) -> FragmentPair:
    if ctx.dialect is Dialect.PYTHON:
        invocation, var = "open(user_path)", "user_path"
    elif ctx.dialect is Dialect.PHP:
        invocation, var = "file_get_contents($userPath);", "$userPath"
    else:
        invocation, var = "fs.readFile(userPath);", "userPath"
    safe_call = invocation.replace(var, _safe_name(ctx))
    return invocation, "\n".join(_path_guard(var, ctx) + [safe_call])


def _path_declarations(snippet: str, ctx: RewriteContext) -> list[tuple[str, str]]:
    declarations: list[tuple[str, str]] = []
    has_base_dir = re.search(r"\bBASE_DIR\b", snippet) is not None
    if ctx.dialect is Dialect.PYTHON:
        if not re.search(r"^\s*import\s+os\b", snippet, re.M):
            declarations.append(("Import os for safe path handling", "import os"))
        if not has_base_dir:
            declarations.append((
                "Restrict file access to this base directory",
                f"BASE_DIR = os.path.realpath({_BASE_DIR_LITERAL})",
            ))
        return declarations
    if ctx.dialect is Dialect.PHP:
        if not has_base_dir:
            declarations.append((
                "Restrict file access to this base directory",
                f'define("BASE_DIR", realpath({_BASE_DIR_LITERAL}));',
            ))
        return declarations
    if not re.search(r"""require\s*\(\s*["']path["']\s*\)|from\s+["']path["']""", snippet):
        if re.search(r"^\s*import\s.+\sfrom\s", snippet, re.M):
            declarations.append(("Import path module for safe path handling", 'import path from "path";'))
        else:
            declarations.append(("Import path module for safe path handling", 'const path = require("path");'))
    if not has_base_dir:
        declarations.append((
            "Restrict file access to this base directory",
            f"const BASE_DIR = path.resolve({_BASE_DIR_LITERAL});",
        ))
    return declarations


def rewrite_path(snippet: str, ctx: RewriteContext) -> str:
    changed = False
    safe = _safe_name(ctx)

    def edit(line: str) -> Optional[LineEdit]:
        nonlocal changed
        matches = [m for m in _PATH_CALL_RE.finditer(line) if m.group("var") != safe]
        if not matches:
            return None
        new_line = line
        guard: list[str] = []
        for match in reversed(matches):
            start, end = match.span("var")
            new_line = new_line[:start] + safe + new_line[end:]
        for match in matches:
            guard.extend(_path_guard(match.group("var"), ctx))
        changed = True
        names = ", ".join(dict.fromkeys(m.group("var") for m in matches))
        return new_line, guard, f"Resolve {names} inside BASE_DIR to prevent directory traversal"

    rewritten = _rewrite_lines(snippet, ctx, edit)
    if not changed:
        return snippet
    return _insert_preamble(rewritten, ctx, _path_declarations(snippet, ctx))


# ---------------------------------------------------------------------------
# Template Table
# ---------------------------------------------------------------------------
FIX_TEMPLATES: tuple[FixTemplate, ...] = (
    FixTemplate(
        vuln_class=VulnClass.SQL_INJECTION,
        keywords=("sql", "injection"),
        rationale=(
            "This fix uses a parameterized SQL query, which ensures user input is "
            "treated strictly as data rather than executable SQL. This prevents "
            "attackers from modifying the query logic through crafted input."
        ),
        extract=extract_sql,
        illustrative=illustrative_sql,
        rewrite=rewrite_sql,
    ),
    FixTemplate(
        vuln_class=VulnClass.XSS,
        keywords=("xss", "cross-site", "reflected"),
        rationale=(
            "This fix applies HTML encoding to user input before inserting it into "
            "the response. Encoding converts special characters (like <, >, &) into "
            "safe HTML entities, preventing browsers from interpreting user data as "
            "executable code."
        ),
        extract=extract_xss,
        illustrative=illustrative_xss,
        rewrite=rewrite_xss,
    ),
    FixTemplate(
        vuln_class=VulnClass.COMMAND_INJECTION,
        keywords=("command", "exec", "os"),
        rationale=(
            "This fix uses an allowlist to restrict which commands can be executed. "
            "By only permitting pre-approved operations, user input cannot be used "
            "to run arbitrary system commands."
        ),
        extract=extract_command,
        illustrative=illustrative_command,
        rewrite=rewrite_command,
    ),
    FixTemplate(
        vuln_class=VulnClass.PATH_TRAVERSAL,
        keywords=("path", "traversal", "directory"),
        rationale=(
            "This fix validates and normalizes file paths to ensure they stay within "
            "the allowed directory. Resolving the path against a fixed base directory "
            "and checking the prefix prevents directory traversal attacks."
        ),
        extract=extract_path,
        illustrative=illustrative_path,
        rewrite=rewrite_path,
    ),
)

GENERIC_TEMPLATE = FixTemplate(
    vuln_class=VulnClass.GENERIC,
    keywords=(),
    rationale=(
        "Review the identified vulnerability and apply the appropriate security "
        "control. Common mitigations include input validation, parameterized "
        "queries, output encoding, or access control depending on the "
        "vulnerability type."
    ),
)
