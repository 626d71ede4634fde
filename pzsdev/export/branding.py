"""Removal of the Armor Games splash screen and footer from the template."""

import re

_FOOTER = re.compile(r'<div class="footer">.*?</div>', re.DOTALL)
_PLAY_BUTTON = re.compile(r'<img id="playbutton"[^>]*>')
_VIDEO = re.compile(r'<video id="video"[\s\S]*?</video>')
_VIDEO_SCRIPT = re.compile(r'<script>var video=document\.getElementById\("video"\)[\s\S]*?</script>')
_CANVAS_RULE = re.compile(r'#gameCanvas\{[^}]*display:none;')
_VIDEO_CSS = re.compile(r'#video\{[^}]*\}')
_PLAY_BUTTON_CSS = re.compile(r'#playbutton\{[^}]*\}')


def strip_armor_games_elements(html: str) -> str:
    """
    Strip the Armor Games branding from a standalone template.

    Removes the footer, the play button and the intro video (markup, script
    and CSS), and un-hides the game canvas since no play-button click will
    ever reveal it. Patterns that don't occur are skipped silently.
    """
    # Only the first footer belongs to the branding
    html = _FOOTER.sub('', html, count=1)

    html = _PLAY_BUTTON.sub('', html)

    html = _VIDEO.sub('', html)
    html = _VIDEO_SCRIPT.sub('', html)

    html = _CANVAS_RULE.sub(lambda m: m.group(0).replace('display:none;', ''), html)

    html = _VIDEO_CSS.sub('', html)
    html = _PLAY_BUTTON_CSS.sub('', html)

    return html
