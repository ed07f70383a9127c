# Rewrite exported card markup into the simplified two-column form.

import html
import logging
import re
from typing import Callable, Optional, Tuple

import constants

logger = logging.getLogger(__name__)

_FLAGS = re.IGNORECASE | re.DOTALL


def _class_token(name: str) -> str:
    """Pattern matching ``name`` as a whole class token inside a class attribute value."""
    return r'(?<![\w-])' + re.escape(name) + r'(?![\w-])'


def _class_attr(name: str) -> str:
    """Lookahead asserting the current tag carries a class attribute containing ``name``."""
    return r'(?=[^>]*\sclass="(?P<cls>[^"]*' + _class_token(name) + r'[^"]*)")'


_RE_STYLE_BLOCK = re.compile(r'<style.*?>.*?</style>', _FLAGS)
_RE_TAG = re.compile(r'<[^>]*>?')

_RE_LINE_TRANSLATION = re.compile(
    r'<div(?![\w-])(?=[^>]*\sclass="[^"]*' + _class_token("dc-line") + r'[^"]*")'
    + _class_attr("dc-translation") + r'[^>]*>(?P<inner>.*?)</div\s*>',
    _FLAGS,
)
_RE_ANY_TRANSLATION = re.compile(
    r'<(?P<tag>[a-z][\w-]*)(?![\w-])' + _class_attr("dc-translation") + r'[^>]*>(?P<inner>.*?)</(?P=tag)\s*>',
    _FLAGS,
)
_RE_CLOZE = re.compile(r'\{\{c\d+::(?P<front>.*?)(?:::(?P<back>[^}]*))?\}\}', _FLAGS)
_RE_UNWRAP = [
    re.compile(r'<span\b[^>]*\sclass="[^"]*' + _class_token(token) + r'[^"]*"[^>]*>(.*?)</span\s*>', _FLAGS)
    for token in ("dc-down", "dc-gap")
]
_RE_CARD = re.compile(r'<(?P<tag>[a-z][\w-]*)(?![\w-])' + _class_attr("dc-card") + r'[^>]*>', _FLAGS)
_RE_IMAGE = re.compile(
    r'<(?P<tag>[a-z][\w-]*)(?![\w-])' + _class_attr("dc-image")
    + r'(?=[^>]*\sstyle="(?P<style>[^"]*)")[^>]*>',
    _FLAGS,
)
_RE_BG_IMAGE = re.compile(r'background-image\s*:\s*url\(([^)]+)\)', _FLAGS)
_RE_PLAIN_LINE = re.compile(r'<(?P<tag>[a-z][\w-]*)(?![\w-])(?=[^>]*\sclass="dc-line")[^>]*>', _FLAGS)

_IMAGE_LAYOUT = ";".join(constants.IMAGE_LAYOUT_DECLARATIONS) + ";"


def strip_tags(text: str) -> str:
    """Drop everything from ``<`` to the next ``>``, decode entities and trim.

    Angle brackets inside attribute values are not told apart from tag
    delimiters, and a stray ``>`` outside a tag is dropped as well.
    """
    if not text:
        return ""
    plain = _RE_TAG.sub("", text).replace(">", "")
    return html.unescape(plain).strip()


def strip_style_blocks(markup: str) -> str:
    return _RE_STYLE_BLOCK.sub("", markup)


def _translation_from_line_container(markup: str) -> Tuple[str, str]:
    # Every ``dc-line dc-translation`` container is dropped from the body; the first supplies the text.
    m = _RE_LINE_TRANSLATION.search(markup)
    if not m:
        return markup, ""
    return _RE_LINE_TRANSLATION.sub("", markup), strip_tags(m.group("inner"))


def _translation_from_any_container(markup: str) -> Tuple[str, str]:
    m = _RE_ANY_TRANSLATION.search(markup)
    if not m:
        return markup, ""
    return markup, strip_tags(m.group("inner"))


TRANSLATION_STRATEGIES: Tuple[Callable[[str], Tuple[str, str]], ...] = (
    _translation_from_line_container,
    _translation_from_any_container,
)


def extract_translation(markup: str) -> Tuple[str, str]:
    """Run the translation strategies in order; the first non-empty candidate wins.

    Returns (markup, translation). The cloze back-half is a later fallback
    handled by :func:`rewrite_clozes`.
    """
    for strategy in TRANSLATION_STRATEGIES:
        markup, candidate = strategy(markup)
        if candidate:
            logger.debug("Translation found by %s", strategy.__name__)
            return markup, candidate
    return markup, ""


def rewrite_clozes(markup: str, color: str, translation: str = "") -> Tuple[str, str]:
    """Replace cloze markers with colored plain-text spans.

    ``translation`` is only filled from a cloze back-half while it is still empty.
    """
    def _replace(m: "re.Match") -> str:
        nonlocal translation
        back = m.group("back")
        if not translation and back:
            translation = strip_tags(back)
        plain = strip_tags(m.group("front"))
        if not plain:
            return ""
        return '<span style="color:' + color + ';">' + html.escape(plain, quote=False) + '</span>'

    markup = _RE_CLOZE.sub(_replace, markup)
    return markup, translation


def unwrap_decorations(markup: str) -> str:
    """Unwrap ``dc-down`` / ``dc-gap`` spans until a full pass changes nothing."""
    while True:
        before = markup
        for pattern in _RE_UNWRAP:
            markup = pattern.sub(r'\1', markup)
        if markup == before:
            return markup


def normalize_cards(markup: str) -> str:
    return _RE_CARD.sub(
        lambda m: '<' + m.group("tag") + ' class="' + m.group("cls") + '" style="' + constants.CARD_STYLE + '">',
        markup,
    )


def _image_style(original_style: str) -> str:
    style = _IMAGE_LAYOUT
    m = _RE_BG_IMAGE.search(original_style)
    if m:
        style += m.group(0) + ";"
    return style


def normalize_images(markup: str) -> str:
    """Give ``dc-image`` boxes a fixed half-width layout, keeping their background image."""
    return _RE_IMAGE.sub(
        lambda m: '<' + m.group("tag") + ' class="' + m.group("cls") + '" style="' + _image_style(m.group("style")) + '">',
        markup,
    )


def clean_sound(sound: Optional[str]) -> str:
    """Trim quotes/whitespace and cut anything before the embedded-audio marker."""
    s = (sound or "").strip(" \t\r\n\"'")
    if s and not s.startswith(constants.SOUND_PREFIX):
        idx = s.find(constants.SOUND_PREFIX)
        if idx >= 0:
            s = s[idx:]
    return s


def insert_audio(markup: str, sound: Optional[str]) -> str:
    """Insert the audio container right after the first plain ``dc-line`` element."""
    s = clean_sound(sound)
    if not s:
        return markup
    m = _RE_PLAIN_LINE.search(markup)
    if not m:
        logger.debug("No dc-line container; dropping sound %r", s)
        return markup
    closing = re.compile(r'</' + re.escape(m.group("tag")) + r'\s*>', re.IGNORECASE).search(markup, m.end())
    if not closing:
        logger.debug("Unclosed dc-line container; dropping sound %r", s)
        return markup
    insert_at = closing.end()
    audio = '<div class="' + constants.AUDIO_CLASS + '" style="' + constants.AUDIO_STYLE + '">' + s + '</div>'
    return markup[:insert_at] + audio + markup[insert_at:]


def collapse_spaces(markup: str) -> str:
    # Single pass: runs of three or more spaces only shrink, they do not reach one.
    return markup.replace("  ", " ")


def transform(
    markup: Optional[str],
    sound: Optional[str] = "",
    color: str = constants.DEFAULT_CLOZE_COLOR,
) -> Tuple[str, str]:
    """Rewrite one markup fragment.

    Returns (rewritten markup, translation text). Missing patterns are not
    errors; each pass simply leaves the markup unchanged.
    """
    h = strip_style_blocks(markup or "")
    h, translation = extract_translation(h)
    h, translation = rewrite_clozes(h, color, translation)
    h = unwrap_decorations(h)
    h = normalize_cards(h)
    h = normalize_images(h)
    h = insert_audio(h, sound)
    h = collapse_spaces(h)
    return h, translation
