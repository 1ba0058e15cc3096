"""
JavaScript and HTML parsing for the taint analysis.

JavaScript is parsed with esprima into an ESTree AST of plain dicts.
HTML documents are reduced to the JavaScript they carry (inline script
bodies and ``on*`` event handler attributes) with BeautifulSoup.
"""

import logging
from pathlib import Path
from typing import Any, Dict, List

import esprima
from bs4 import BeautifulSoup

from .exceptions import ParseError

logger = logging.getLogger(__name__)

SCRIPT_SUFFIXES = frozenset({".js", ".jsx", ".mjs", ".cjs"})
HTML_SUFFIXES = frozenset({".html", ".htm"})

# <script type="..."> values that hold JavaScript
_JS_SCRIPT_TYPES = frozenset({
    "",
    "text/javascript",
    "application/javascript",
    "module",
})


class JavaScriptParser:
    """
    Parser for JavaScript code and HTML files.

    ``parse_code`` is the single entry point to the external parser; every
    other method only locates the code to hand to it.
    """

    def __init__(self, verbose: bool = False):
        """
        Initialize the parser.

        Args:
            verbose: Log each parsed unit at INFO instead of DEBUG
        """
        self.verbose = verbose

    def parse_code(self, code: str, filename: str = "<string>") -> Dict[str, Any]:
        """
        Parse JavaScript source text.

        Args:
            code: JavaScript code as a string
            filename: Name used in error messages

        Returns:
            ESTree ``Program`` node as nested dicts, with ``range`` offsets

        Raises:
            ParseError: If the code is neither a valid script nor a module
        """
        logger.log(logging.INFO if self.verbose else logging.DEBUG, "Parsing code from %s", filename)

        try:
            program = esprima.parseScript(code, range=True)
        except Exception as script_err:  # esprima.Error
            try:
                program = esprima.parseModule(code, range=True)
            except Exception:
                raise ParseError(str(script_err), filename) from script_err

        return program.toDict()

    def extract_scripts(self, html: str) -> List[str]:
        """
        Collect JavaScript embedded in an HTML document.

        Args:
            html: HTML content

        Returns:
            Inline script bodies followed by event handler attribute code,
            in document order
        """
        soup = BeautifulSoup(html, "lxml")
        blocks: List[str] = []

        for script in soup.find_all("script"):
            if script.get("src"):
                continue
            script_type = (script.get("type") or "").strip().lower()
            if script_type not in _JS_SCRIPT_TYPES:
                continue
            content = script.string
            if content and content.strip():
                blocks.append(str(content))

        for element in soup.find_all(True):
            for attr_name, attr_value in element.attrs.items():
                if not attr_name.lower().startswith("on"):
                    continue
                if isinstance(attr_value, str) and attr_value.strip():
                    logger.debug("Found event handler %s on <%s>", attr_name, element.name)
                    blocks.append(attr_value)

        return blocks

    def parse_file(self, file_path: Path) -> List[str]:
        """
        Read a JavaScript or HTML file and return the code blocks it holds.

        Args:
            file_path: Path to the file

        Returns:
            JavaScript code blocks to analyze

        Raises:
            FileNotFoundError: If the file doesn't exist
        """
        if not file_path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        content = file_path.read_text(encoding="utf-8", errors="ignore")
        if file_path.suffix.lower() in HTML_SUFFIXES:
            return self.extract_scripts(content)
        return [content]
