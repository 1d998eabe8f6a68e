import difflib, json
from typing import Any, Iterable, Iterator, List

from .escaping import escape_invisibles

PREAMBLE_LINES = 4
NO_NEWLINE = "\\ No newline at end of file"

def stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    try:
        return json.dumps(value)
    except (TypeError, ValueError):
        return repr(value)

def patch_lines(name: str, old: str, new: str) -> Iterator[str]:
    """Unified diff of two texts in classic patch form.

    Yields the 4-line preamble, ``@@`` hunk headers and content lines. Content
    lines keep their own terminator; an unterminated one is followed by the
    no-newline marker.
    """
    yield f"Index: {name}\n"
    yield "=" * 67 + "\n"
    yield f"--- {name}\n"
    yield f"+++ {name}\n"
    hunks = difflib.unified_diff(old.splitlines(True), new.splitlines(True), n=4)
    for i, line in enumerate(hunks):
        if i < 2:  # difflib's own ---/+++ pair
            continue
        yield line
        if line[:1] in "-+ " and not line.endswith("\n"):
            yield NO_NEWLINE + "\n"

def _strip_terminator(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line

def clean_lines(lines: Iterable[str]) -> List[str]:
    """Drop hunk and no-newline markers; escape what is left of each line."""
    return [escape_invisibles(_strip_terminator(l)) for l in lines
            if "@@" not in l and NO_NEWLINE not in l]

def unified_diff(err, include_stack: bool = False) -> str:
    """Diagnostic body for a failure: cleaned actual/expected diff, then the stack."""
    if err is None:
        return ""
    msg = ""
    if err.actual is not None and err.expected is not None:
        lines = list(patch_lines("string", stringify(err.actual), stringify(err.expected)))
        msg = "\n".join(clean_lines(lines[PREAMBLE_LINES:]))
    if include_stack and err.stack:
        if msg:
            msg += "\n"
        msg += "\n".join(clean_lines(err.stack.split("\n")[1:]))
    return msg
