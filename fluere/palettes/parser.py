"""
Palette text → PaletteStore. Validates every field and reports the first problem
with its line number instead of reading past malformed input.

Format (whitespace-delimited, ASCII):

    Number_of_palettes 3
    Cold        4 0x33ccff 0x0099ff 0x0033cc 0x0033ff
    Grayscale   6 0xffffff 0x333333 0xcccccc 0x999999 0x666666 0x000000
    Hot         5 0xffff33 0xffcc00 0xff6600 0xbb0033 0xff3300
"""
import logging
import re
from pathlib import Path
from typing import Iterator

from ..errors import InvalidParameterError, PaletteParseError
from .store import MAX_NAME_LENGTH, Palette, PaletteStore

logger = logging.getLogger(__name__)

HEADER = "Number_of_palettes"
_HEX_RE = re.compile(r"^(?:0[xX])?([0-9a-fA-F]{1,6})$")


class _Tokens:
    """Whitespace tokens with the line each came from."""

    def __init__(self, text: str):
        self._items: Iterator[tuple[int, str]] = (
            (lineno, tok)
            for lineno, line in enumerate(text.splitlines(), start=1)
            for tok in line.split()
        )
        self.line = 1

    def next(self, what: str) -> str:
        try:
            self.line, tok = next(self._items)
        except StopIteration:
            raise PaletteParseError(f"unexpected end of input, expected {what}", line=self.line) from None
        return tok

    def leftover(self) -> tuple[int, str] | None:
        return next(self._items, None)


def _parse_count(tokens: _Tokens, what: str) -> int:
    tok = tokens.next(what)
    if not (tok.isascii() and tok.isdigit()):
        raise PaletteParseError(f"expected {what}, got {tok!r}", line=tokens.line, token=tok)
    value = int(tok)
    if value < 1:
        raise PaletteParseError(f"{what} must be at least 1, got {value}", line=tokens.line, token=tok)
    return value


def _parse_color(tokens: _Tokens, palette_name: str) -> int:
    tok = tokens.next(f"a 0xRRGGBB color for palette {palette_name!r}")
    m = _HEX_RE.match(tok)
    if not m:
        raise PaletteParseError(f"not a hex color: {tok!r}", line=tokens.line, token=tok)
    return int(m.group(1), 16)


def parse_palette_text(text: str) -> PaletteStore:
    """Parse palette text. Raises PaletteParseError on any missing, extra or malformed field."""
    tokens = _Tokens(text)
    header = tokens.next(HEADER)
    if header != HEADER:
        raise PaletteParseError(f"expected {HEADER!r} header, got {header!r}", line=tokens.line, token=header)
    count = _parse_count(tokens, "number of palettes")

    palettes: list[Palette] = []
    for _ in range(count):
        name = tokens.next("a palette name")
        name_line = tokens.line
        if len(name) > MAX_NAME_LENGTH:
            raise PaletteParseError(
                f"palette name {name!r} is longer than {MAX_NAME_LENGTH} characters",
                line=name_line,
                token=name,
            )
        n_colors = _parse_count(tokens, f"number of colors for palette {name!r}")
        values = [_parse_color(tokens, name) for _ in range(n_colors)]
        try:
            palettes.append(Palette.from_hex(name, values))
        except InvalidParameterError as e:
            raise PaletteParseError(str(e), line=name_line, token=name) from e

    extra = tokens.leftover()
    if extra is not None:
        line, tok = extra
        raise PaletteParseError(
            f"unexpected token {tok!r} after {count} palettes (header count too small?)",
            line=line,
            token=tok,
        )
    return PaletteStore(tuple(palettes))


def load_palette_file(path: Path | str) -> PaletteStore:
    """Read and parse a palette file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="ascii")
    except UnicodeDecodeError as e:
        raise PaletteParseError(f"{path}: palette files must be ASCII ({e})") from e
    try:
        store = parse_palette_text(text)
    except PaletteParseError as e:
        err = PaletteParseError(f"{path}: {e}", token=e.token)
        err.line = e.line
        raise err from e
    logger.debug("Loaded %d palettes from %s", len(store), path)
    return store


def default_palette_path() -> Path:
    return Path(__file__).resolve().parent.parent / "data" / "palettes.txt"


def load_default_palettes() -> PaletteStore:
    """The palettes shipped with the package."""
    return load_palette_file(default_palette_path())
