"""
Utility functions for the schema to parser generator.

Name normalization primitives shared by the analyzer and the backends.
"""

# Markers identifying the kind of a schema definition ("w_CT_Foo", "s_ST_OnOff", "w_EG_Run")
DEFAULT_KIND_MARKERS = ("CT_", "ST_", "EG_")

# Rust reserved keywords that need escaping when used as identifiers
RUST_RESERVED_KEYWORDS = frozenset(
    {
        "abstract",
        "as",
        "async",
        "await",
        "become",
        "box",
        "break",
        "const",
        "continue",
        "crate",
        "do",
        "dyn",
        "else",
        "enum",
        "extern",
        "final",
        "fn",
        "for",
        "if",
        "impl",
        "in",
        "loop",
        "macro",
        "match",
        "mod",
        "move",
        "override",
        "priv",
        "pub",
        "ref",
        "return",
        "self",
        "static",
        "struct",
        "super",
        "trait",
        "try",
        "type",
        "typeof",
        "unsized",
        "use",
        "virtual",
        "where",
        "yield",
    }
)

RUST_KEYWORD_ESCAPE_PREFIX = "r#"

_SEPARATORS = ("_", "-")


def strip_namespace_prefix(name: str, markers: tuple[str, ...] = DEFAULT_KIND_MARKERS) -> str:
    """Strip the namespace prefix in front of a kind marker.

    Examples:
        "w_CT_Body" -> "CT_Body"
        "s_ST_OnOff" -> "ST_OnOff"
        "CT_Body" -> "CT_Body"
        "r_id" -> "r_id"

    Args:
        name: Schema definition name
        markers: Kind markers to look for, in priority order

    Returns:
        The name starting at the first marker found after position 0, or the name unchanged
    """
    for marker in markers:
        pos = name.find(marker)
        if pos > 0:
            return name[pos:]
    return name


def to_pascal_case(text: str) -> str:
    """Convert text to PascalCase, keeping the case of non-initial characters.

    Acronyms survive the conversion:
        "CT_Foo" -> "CTFoo"
        "fooBar-baz" -> "FooBarBaz"
        "sheetPr" -> "SheetPr"
    """
    result = []
    capitalize_next = True
    for ch in text:
        if ch in _SEPARATORS:
            capitalize_next = True
        elif capitalize_next:
            result.append(ch.upper())
            capitalize_next = False
        else:
            result.append(ch)
    return "".join(result)


def to_snake_case(
    text: str,
    reserved_words: frozenset[str] | set[str] = RUST_RESERVED_KEYWORDS,
    escape_prefix: str = RUST_KEYWORD_ESCAPE_PREFIX,
) -> str:
    """Convert camelCase text to snake_case, escaping reserved words.

    Examples:
        "FooBarBaz" -> "foo_bar_baz"
        "sheetPr" -> "sheet_pr"
        "type" -> "r#type"

    Args:
        text: The text to convert
        reserved_words: Words of the target language that cannot be used as identifiers
        escape_prefix: Marker prepended to a reserved word

    Returns:
        snake_case identifier
    """
    result = []
    for i, ch in enumerate(text):
        if ch.isupper() and i > 0:
            result.append("_")
        result.append(ch.lower())
    name = "".join(result)
    if name in reserved_words:
        return f"{escape_prefix}{name}"
    return name
