"""
The "cpp" preset: lexical C++ highlighting.

Line by line and regex only, so block comments spanning lines are not
recognised.
"""

from ..rules import PresetColor, RgbColor, Rule

RULES = (
    # String and character literals
    Rule(r""""[^"\\]*(\\.[^"\\]*)*"|'[^'\\]*(\\.[^'\\]*)*'""", RgbColor(206, 145, 120), is_regex=True),
    # Comments
    Rule(r"//.*|/\*.*\*/", RgbColor(106, 153, 85), is_regex=True),
    # Preprocessor directives
    Rule(
        r"^\s*#\s*(include|define|ifdef|ifndef|endif|if|else|pragma|line|error).*$",
        PresetColor.MAGENTA,
        is_regex=True,
    ),
    # Numbers: hex, binary, decimal, floating point
    Rule(r"\b(0x[0-9a-fA-F]+|0b[01]+|\d+\.?\d*([eE][+-]?\d+)?|\d+)\b", RgbColor(181, 206, 168), is_regex=True),
    # Operators
    Rule(
        r"(->|::|<<=|>>=|==|!=|<=|>=|&&|\|\||\+\+|--|<<|>>|[\+\-\*\/%=&<>!&\|\^~\.\?:;])",
        PresetColor.RED,
        is_regex=True,
    ),
    # Brackets
    Rule(r"[\(\)\{\}\[\]]", RgbColor(255, 215, 0), is_regex=True),
    # Control flow
    Rule(
        r"\b(if|else|for|while|do|switch|case|default|return|break|continue|goto|throw|try|catch)\b",
        RgbColor(197, 134, 192),
        is_regex=True,
    ),
    # Types and qualifiers
    Rule(
        r"\b(int|long|short|char|float|double|bool|void|size_t|u?int(8|16|32|64)_t|auto|unsigned"
        r"|signed|const|static|inline|virtual|override|final|volatile|mutable|thread_local"
        r"|explicit|enum|struct|class|union|typename|template)\b",
        PresetColor.BLUE,
        is_regex=True,
    ),
    # Other keywords
    Rule(
        r"\b(public|private|protected|using|namespace|friend|this|operator|new|delete|true|false"
        r"|nullptr|constexpr|static_cast|dynamic_cast|reinterpret_cast|const_cast)\b",
        PresetColor.CYAN,
        is_regex=True,
    ),
    # std:: names
    Rule(r"\bstd::\w*", PresetColor.YELLOW, is_regex=True),
    # PascalCase type names
    Rule(r"\b[A-Z]\w*\b", PresetColor.GREEN, is_regex=True),
)
