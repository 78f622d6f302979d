"""
C header export/import for firmware builds

The header carries four macros (LED_W, LED_H, LED_FRAMES, LED_FPS) and one
`led_anim[LED_FRAMES][H]` array of row words per merged frame. Parsing accepts
headers written for other matrix sizes.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .bitcodec import WORD_MASK, unpack_words
from .config import GridConfig, DEFAULT_CONFIG, DEFAULT_FPS
from .grid import Grid

logger = logging.getLogger(__name__)

ARRAY_NAME = "led_anim"
MACRO_WIDTH = "LED_W"
MACRO_HEIGHT = "LED_H"
MACRO_FRAMES = "LED_FRAMES"
MACRO_FPS = "LED_FPS"

_IDENT_CHARS = set("abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789_")


class HeaderParseError(ValueError):
    """Raised when header text cannot be turned into frames."""


@dataclass
class HeaderAnimation:
    """
    Frames recovered from a header

    Attributes:
        width: Source matrix width declared by the header
        height: Source matrix height declared by the header
        frames_count: Number of frames read
        fps: Playback rate
        frames: Grids sized to the live configuration
    """
    width: int
    height: int
    frames_count: int
    fps: int
    frames: List[Grid] = field(default_factory=list)


def format_word(value: int) -> str:
    return '0x' + format(int(value) & WORD_MASK, 'x')


def generate_header(frames_words: Sequence[Sequence[int]], fps: int,
                    config: GridConfig = DEFAULT_CONFIG) -> str:
    """
    Build header source for already word-packed frames

    Args:
        frames_words: One list of config.height row words per frame
        fps: Playback rate written to LED_FPS
        config: Matrix dimensions written to LED_W / LED_H

    Returns:
        Header text
    """
    body = ',\n  '.join(
        '{' + ', '.join(format_word(v) for v in words) + '}'
        for words in frames_words
    )
    lines = [
        "#pragma once",
        "#include <stdint.h>",
        "#include <avr/pgmspace.h>",
        f"#define {MACRO_WIDTH} {config.width}",
        f"#define {MACRO_HEIGHT} {config.height}",
        f"#define {MACRO_FRAMES} {len(frames_words)}",
        f"#define {MACRO_FPS} {fps}",
        f"const uint32_t {ARRAY_NAME}[{MACRO_FRAMES}][{config.height}] PROGMEM = {{",
        f"  {body}",
        "};",
    ]
    return '\n'.join(lines)


def strip_comments(text: str) -> str:
    """Remove // and /* */ comments so braces and digits inside them are not scanned"""
    out = []
    i = 0
    n = len(text)
    while i < n:
        if text.startswith('//', i):
            end = text.find('\n', i)
            if end == -1:
                break
            i = end
        elif text.startswith('/*', i):
            end = text.find('*/', i + 2)
            if end == -1:
                break
            out.append(' ')
            i = end + 2
        else:
            out.append(text[i])
            i += 1
    return ''.join(out)


def parse_int_token(token: str) -> Optional[int]:
    """
    Parse a C integer literal (hex or decimal, optional u/l suffix)

    Returns None when the token is not a valid literal.
    """
    literal = token.strip().lower().rstrip('ul')
    try:
        if literal.startswith('0x'):
            return int(literal[2:], 16)
        return int(literal, 10)
    except ValueError:
        return None


def scan_macros(text: str) -> Dict[str, int]:
    """Collect integer values of `#define NAME VALUE` lines"""
    macros: Dict[str, int] = {}
    for line in text.splitlines():
        stripped = line.strip()
        if not stripped.startswith('#'):
            continue
        directive = stripped[1:].lstrip()
        if not directive.startswith('define'):
            continue
        parts = directive.split()
        if len(parts) < 3:
            continue
        value = parse_int_token(parts[2])
        if value is not None:
            macros[parts[1]] = value
    return macros


def find_initializer_body(text: str) -> Optional[str]:
    """
    Text between the braces of the animation array initializer

    Anchors on the array name when present, otherwise on the first assignment.
    """
    anchor = text.find(ARRAY_NAME + '[')
    if anchor == -1:
        anchor = text.find(ARRAY_NAME)
    if anchor == -1:
        anchor = text.find('=')
    if anchor == -1:
        return None
    start = text.find('{', anchor)
    if start == -1:
        return None
    depth = 0
    for i in range(start, len(text)):
        ch = text[i]
        if ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start + 1:i]
    return None


def scan_numbers(body: str) -> List[int]:
    """Integer literals in order of appearance, each reduced to an unsigned 32-bit value"""
    numbers = []
    i = 0
    n = len(body)
    while i < n:
        ch = body[i]
        if ch in _IDENT_CHARS:
            j = i
            while j < n and body[j] in _IDENT_CHARS:
                j += 1
            token = body[i:j]
            if ch.isdigit():
                value = parse_int_token(token)
                if value is not None:
                    numbers.append(value & WORD_MASK)
            i = j
        else:
            i += 1
    return numbers


def looks_like_header(text: str) -> bool:
    macros = scan_macros(text)
    return ARRAY_NAME in text and MACRO_WIDTH in macros and MACRO_HEIGHT in macros


def parse_header(text: str, config: GridConfig = DEFAULT_CONFIG,
                 default_fps: int = DEFAULT_FPS) -> HeaderAnimation:
    """
    Parse header text back into frames

    Args:
        text: Header source
        config: Live matrix dimensions; missing LED_W / LED_H default to these
        default_fps: Used when LED_FPS is absent or not positive

    Returns:
        HeaderAnimation with one grid per frame

    Raises:
        HeaderParseError: No initializer body, no numbers in it, a frame count below
            one, or too few numbers for the frame count
    """
    source = strip_comments(text)
    macros = scan_macros(source)
    src_width = macros.get(MACRO_WIDTH, config.width)
    src_height = macros.get(MACRO_HEIGHT, config.height)
    fps = macros.get(MACRO_FPS, default_fps)
    if fps < 1:
        fps = default_fps

    body = find_initializer_body(source)
    if body is None:
        raise HeaderParseError("No array initializer found in header")

    words = scan_numbers(body)
    if not words:
        raise HeaderParseError("Array initializer contains no numbers")

    rows_per_frame = max(1, src_height)
    if MACRO_FRAMES in macros:
        frames_count = macros[MACRO_FRAMES]
    else:
        frames_count = len(words) // rows_per_frame
    if frames_count < 1:
        raise HeaderParseError(f"Invalid frame count: {frames_count}")

    needed = frames_count * rows_per_frame
    if len(words) < needed:
        raise HeaderParseError(
            f"Header declares {frames_count} frames of {rows_per_frame} rows "
            f"but only {len(words)} values were found"
        )

    frames = []
    for f in range(frames_count):
        chunk = words[f * rows_per_frame:(f + 1) * rows_per_frame]
        frames.append(unpack_words(chunk, src_width, src_height, config))

    if src_width != config.width or src_height != config.height:
        logger.warning("Header written for %dx%d, importing into %dx%d",
                       src_width, src_height, config.width, config.height)
    logger.debug("Parsed header: %d frames, %d words", frames_count, len(words))

    return HeaderAnimation(
        width=src_width,
        height=src_height,
        frames_count=frames_count,
        fps=fps,
        frames=frames,
    )
