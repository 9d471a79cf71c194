import pytest

from luckydraw.domain.sign_display import EMPTY_DESCRIPTION, SignLevel, sign_display


def test_empty_sign_gets_new_year_text():
    assert sign_display(SignLevel.empty, "Empty") == ("空签", EMPTY_DESCRIPTION)


@pytest.mark.parametrize(
    "level, title",
    [(1, "上上签"), (2, "上签"), (3, "特签")],
)
def test_prize_levels_congratulate_with_tier_name(level, title):
    assert sign_display(level, "whatever") == (title, f"恭喜抽中{title}，祝新年顺遂。")


def test_unknown_level_falls_back_to_sign_type():
    assert sign_display(9, "Mystery") == ("Mystery", "恭喜抽中Mystery，祝新年顺遂。")
    assert sign_display(9, None)[0] == ""
