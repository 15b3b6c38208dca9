import json

from daycare.prompts.curriculum import AREAS, EXPERT_PERSONA, curriculum_for

system_prompt = f"{EXPERT_PERSONA} 보육교사가 쉽게 이해할 수 있도록 문서를 작성합니다."

user_prompt = """
월간 주제: {theme}
기간: {start_date} ~ {end_date} ({total_weeks}주)
연령: {age_group}세 ({curriculum} 기반)

주차별로 주제에 맞는 소주제를 생성하고, 각 주차의 {areas} 영역별로 아동이 이해하기 쉬운 활동명을 작성하세요. 활동내용은 활동영역을 반영하여 아동의 연령에 맞는 수준의 활동을 제시하세요. 준비자료는 활동에 따라 필요한 재료를 입력하세요.

출력 형식: JSON 배열, 각 주차 객체에 {{week: 1, subtheme: '소주제', activities: [{{area: '영역', activityName: '활동명', content: '내용', materials: '준비자료'}} ... ]}}

주차: {week_numbers}
"""


def build_prompt(
    theme: str, start_date: str, end_date: str, age_group: str, weeks: list[dict]
) -> str:
    return user_prompt.format(
        theme=theme,
        start_date=start_date,
        end_date=end_date,
        total_weeks=len(weeks),
        age_group=age_group,
        curriculum=curriculum_for(age_group),
        areas=", ".join(AREAS),
        week_numbers=json.dumps([week["week"] for week in weeks]),
    ).strip()
