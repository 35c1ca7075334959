"""
既知カテゴリのラベル表

カテゴリ名は自由入力（オープン語彙）なので、ここにあるのは表示用の参照表だけ。
未知の名前でも例外にはせずフォールバックを返す。
"""

from typing import NamedTuple

from .models import CategoryType


class CategoryInfo(NamedTuple):
    """カテゴリの表示情報"""

    name: str
    category_type: CategoryType
    emoji: str
    is_known: bool


EXERCISE_CATEGORIES: dict[str, str] = {
    "근력 운동": "💪",
    "유산소 운동": "🏃",
    "스트레칭/요가": "🧘",
    "구기/스포츠": "⚽",
    "야외 활동": "🏔️",
    "댄스/무용": "💃",
}

DIET_CATEGORIES: dict[str, str] = {
    "집밥/도시락": "🍱",
    "건강식/샐러드": "🥗",
    "단백질 위주": "🍗",
    "간식/음료": "🍪",
    "외식/배달": "🍽️",
    "영양제/보충제": "💊",
}

_FALLBACK_EMOJI: dict[CategoryType, str] = {
    CategoryType.EXERCISE: "🏃",
    CategoryType.DIET: "🍽️",
}


def _table(category_type: CategoryType | str) -> dict[str, str]:
    if CategoryType(category_type) is CategoryType.EXERCISE:
        return EXERCISE_CATEGORIES
    return DIET_CATEGORIES


def known_categories(category_type: CategoryType | str | None = None) -> list[str]:
    """既知カテゴリ名の一覧（定義順）"""
    if category_type is None:
        return list(EXERCISE_CATEGORIES) + list(DIET_CATEGORIES)
    return list(_table(category_type))


def is_known_category(
    name: str, category_type: CategoryType | str | None = None
) -> bool:
    return name in known_categories(category_type)


def lookup_category(
    name: str, category_type: CategoryType | str | None = None
) -> CategoryInfo:
    """カテゴリ名から表示情報を引く"""
    if category_type is None:
        if name in DIET_CATEGORIES:
            category_type = CategoryType.DIET
        else:
            category_type = CategoryType.EXERCISE
    category_type = CategoryType(category_type)

    table = _table(category_type)
    if name in table:
        return CategoryInfo(name, category_type, table[name], True)
    return CategoryInfo(name, category_type, _FALLBACK_EMOJI[category_type], False)


def display_label(name: str, category_type: CategoryType | str | None = None) -> str:
    """絵文字付きの表示ラベル"""
    info = lookup_category(name, category_type)
    return f"{info.emoji} {info.name}"
