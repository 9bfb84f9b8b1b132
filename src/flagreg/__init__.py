"""flagreg: compile-time flag registry.

Resolves the boolean flags a compiler's macro system can query (platform
flags from the target triple, compiler-option flags, and user ``-D``
defines) and answers "is this flag set for the target / for the host?".
"""

__version__ = "0.1.0"
