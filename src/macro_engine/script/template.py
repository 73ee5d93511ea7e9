"""Starter text for new macros."""

from __future__ import annotations

from typing import Tuple

CURSOR_MARK = "#cursor"

DEFAULT_MACRO = """# macro
# names available here: context, debug, util (plus any host extras)

file = context.get_file()
text = file.get_text()

#cursor

file.set_text(text)
"""


def new_macro(template: str = DEFAULT_MACRO) -> Tuple[str, int]:
    """Return the template text and the offset where the cursor belongs."""

    offset = template.find(CURSOR_MARK)
    if offset == -1:
        return template, max(len(template) - 1, 0)
    return template.replace(CURSOR_MARK, "", 1), offset


__all__ = ["CURSOR_MARK", "DEFAULT_MACRO", "new_macro"]
