"""View class generator.

Generates and incrementally patches one source file per root. Machine-owned
regions are demarcated, each marker alone on its own (indented) line:

    // <auto-fields>      ... field declarations ...      // </auto-fields>
    // <auto-props>       ... read-only properties ...    // </auto-props>
    // <auto-assign>      ... initializer method ...      // </auto-assign>

Anything outside these markers is preserved untouched.
"""

# Marker constants used by templates and merge
FIELDS_START = "// <auto-fields>"
FIELDS_END = "// </auto-fields>"
PROPS_START = "// <auto-props>"
PROPS_END = "// </auto-props>"
ASSIGN_START = "// <auto-assign>"
ASSIGN_END = "// </auto-assign>"
USER_START = "// <user-code>"
USER_END = "// </user-code>"
