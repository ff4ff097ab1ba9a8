"""Config patching: wire generated rewrite rules into a JS/TS config file.

Text in, text out. Callers read and write the file; the patcher only
decides where the registration goes, or refuses.
"""

from mdnegotiate.patching.patcher import (
    ConfigPatcher,
    InsertionPoint,
    PatchResult,
    PatchStatus,
    Shape,
    find_insertion_point,
    patch_config,
)
from mdnegotiate.patching.snippets import (
    REWRITES_MARKER,
    PatchSnippet,
    new_config_text,
    render_rules,
    rewrites_snippet,
)

__all__ = [
    "REWRITES_MARKER",
    "ConfigPatcher",
    "InsertionPoint",
    "PatchResult",
    "PatchSnippet",
    "PatchStatus",
    "Shape",
    "find_insertion_point",
    "new_config_text",
    "patch_config",
    "render_rules",
    "rewrites_snippet",
]
