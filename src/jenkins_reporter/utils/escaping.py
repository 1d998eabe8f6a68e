from xml.sax.saxutils import escape

# saxutils.escape handles &, < and > (ampersand first) before these.
_QUOTES = {'"': "&quot;", "'": "&#39;"}

def html_escape(value) -> str:
    return escape(str(value), _QUOTES)

def escape_invisibles(line: str) -> str:
    """Make tab/CR/LF visible so diff text survives as XML content."""
    return line.replace("\t", "<tab>").replace("\r", "<CR>").replace("\n", "<LF>\n")
