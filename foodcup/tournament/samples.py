"""Built-in sample tournaments seeded into an empty store."""

from __future__ import annotations

from typing import TYPE_CHECKING

from foodcup.constants import (
    DEFAULT_REWARDS,
    REWARD_MODE_RANDOM,
    REWARD_MODE_WEIGHTED,
)

from .services import build_tournament

if TYPE_CHECKING:
    from .models import Tournament

GWANCHEOL_DONG_ENTRIES = [
    "광화문국밥",
    "을지로양말식당",
    "삼거리포차",
    "인사동만두",
    "청계천메밀막국수",
    "경복궁비빔밥",
    "효자동닭한마리",
    "단성사칼국수",
    "관철동김치찌개",
    "피맛골비빔막국수",
    "종각돈카츠",
    "보신각곰탕",
    "낙원떡볶이",
    "서린낙지",
    "광장시장육회",
    "계동볶음밥",
    "무교동낙지",
    "종로파스타",
    "커리페스트",
    "북촌칼국수",
    "연탄불고기",
    "계동칼비빔",
    "종로쌀국수",
    "인사동국시",
    "돈부리상회",
    "종로라멘",
    "닭갈비연구소",
    "막창연대",
    "김밥세상",
    "골목김치말이",
    "불백장인",
    "곰탕연구소",
]

GANGNAM_LUNCH_ENTRIES = [
    "국물닭갈비",
    "규동마스터",
    "마라샹궈클럽",
    "김치찌개연구소",
    "회덮밥천국",
    "수제버거앤프라이",
    "덮밥의정석",
    "평양냉면",
    "비빔국수",
    "바질파스타",
    "쌀국수",
    "돈코츠라멘",
    "초밥",
    "분짜",
    "타코",
    "연어덮밥",
]


def seed_samples() -> list[Tournament]:
    """Return freshly built copies of the sample tournaments."""
    return [
        build_tournament(
            title="Gwancheol-dong Eats: Round of 32",
            description="Let the real local spots of Gwancheol-dong fight it out!",
            location_tag="Gwancheol-dong, Jongno-gu, Seoul",
            entries=GWANCHEOL_DONG_ENTRIES,
            reward_mode=REWARD_MODE_RANDOM,
            rewards_pool=DEFAULT_REWARDS,
        ),
        build_tournament(
            title="Gangnam Office Lunch: Round of 16",
            description="Good value and fast",
            location_tag="Gangnam-gu, Seoul",
            entries=GANGNAM_LUNCH_ENTRIES,
            reward_mode=REWARD_MODE_WEIGHTED,
            rewards_pool=DEFAULT_REWARDS,
        ),
    ]
