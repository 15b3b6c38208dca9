"""Korean national curriculum vocabulary shared by the generation prompts."""

AGE_GROUPS = ("0-2", "3-5")

# Five developmental areas, identical for both curricula.
AREAS = ["신체운동·건강", "의사소통", "사회관계", "예술경험", "자연탐구"]

EXPERT_PERSONA = "당신은 박사급 이상의 아동보육과정 전문가입니다."


def curriculum_for(age_group: str) -> str:
    """Standard childcare curriculum for infants, Nuri curriculum for 3-5."""
    return "표준보육과정" if age_group == "0-2" else "누리과정"
