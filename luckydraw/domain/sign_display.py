"""Display text for pool signs (v1 /api draw responses).

Pure mapping from the stored level to what the frontend shows. Nothing here
changes the stored sign.
"""

from enum import IntEnum


class SignLevel(IntEnum):
    empty = 0
    top_top = 1
    top = 2
    special = 3


LEVEL_TITLES = {
    SignLevel.empty: "空签",
    SignLevel.top_top: "上上签",
    SignLevel.top: "上签",
    SignLevel.special: "特签",
}

EMPTY_DESCRIPTION = "所行皆明，所向皆顺。新年快乐！"


def sign_title(level: int, sign_type: str | None = None) -> str:
    """Title for a level; unknown levels fall back to the sign type."""
    try:
        return LEVEL_TITLES[SignLevel(level)]
    except ValueError:
        return sign_type or ""


def sign_description(level: int, title: str) -> str:
    if level == SignLevel.empty:
        return EMPTY_DESCRIPTION
    return f"恭喜抽中{title}，祝新年顺遂。"


def sign_display(level: int, sign_type: str | None = None) -> tuple[str, str]:
    """Return (title, description) for a sign level."""
    title = sign_title(level, sign_type)
    return title, sign_description(level, title)
