from daycare.prompts.curriculum import EXPERT_PERSONA

system_prompt = (
    f"{EXPERT_PERSONA} 교사의 전문성이 드러날 수 있도록 아동의 관찰 내용을 작성합니다."
)


def build_prompt(
    child_name: str,
    age_group: str,
    keywords: str,
    curriculum: str,
    date: str | None = None,
) -> str:
    lines = [
        f"아동명: {child_name}",
        f"연령: {age_group}세 ({curriculum} 기준)",
        f"키워드: {keywords}",
    ]
    if date:
        lines.append(f"날짜: {date}")
    lines.append("")
    lines.append(
        "키워드를 기반으로 해당 아동의 발달 상황을 관찰한 상세한 내용을 작성해주세요. "
        "연령에 맞는 발달 영역을 반영하고, 구체적이고 실용적인 관찰을 서술하세요. "
        "한국어로 작성해주세요."
    )
    return "\n".join(lines)
