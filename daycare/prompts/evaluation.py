from daycare.prompts.curriculum import EXPERT_PERSONA, curriculum_for

EVALUATION_HEADER = "**평가 및 지원계획:**"
CHILD_OBSERVATION_HEADER = "**아동관찰:**"

NO_PREVIOUS_PLAN = "이전 계획 정보 없음"
NO_TOMORROW_PLAN = "다음날 계획 정보 없음"

system_prompt = (
    f"{EXPERT_PERSONA} 보육교사가 쉽게 이해할 수 있도록 문서를 작성합니다.\n\n"
    "평가 작성 시 '-했습니다.'라는 어체를 사용하지 않는다. "
    "'-한다., -했다.'로 어체를 지정한다."
)

user_prompt = """
연령: {age_group}세 ({curriculum} 기준)
키워드: {keywords}

어제 지원계획: {previous_plan}
내일 활동계획: {tomorrow_plan}

어제 계획이 오늘 어떻게 반영되었는지, 오늘의 놀이활동(키워드 기반)을 평가하고, 내일의 구체적인 지원계획을 포함한 평가 및 지원계획을 작성해주세요. 아동의 발달 상황 관찰 내용은 별도로 작성하세요.

교사의 전문적인 관점에서의 제언은 포함하지 마세요. 날짜와 요일은 언급하지 마세요.

출력을 다음과 같이 포맷하세요:

{evaluation_header}

[어제 계획 반영, 오늘 놀이 평가, 내일 지원 계획을 번호 구분 없이 하나의 연결된 글로 상세히 작성]

{child_observation_header}

[아동의 발달 상황 관찰 내용을 상세히 작성]

모든 내용은 실무에서 바로 활용할 수 있도록 구체적이고 실용적으로 작성해주세요. 한국어로 작성해주세요.
"""


def build_prompt(
    keywords: str, age_group: str, previous_plan: str, tomorrow_plan: str
) -> str:
    return user_prompt.format(
        age_group=age_group,
        curriculum=curriculum_for(age_group),
        keywords=keywords,
        previous_plan=previous_plan or NO_PREVIOUS_PLAN,
        tomorrow_plan=tomorrow_plan or NO_TOMORROW_PLAN,
        evaluation_header=EVALUATION_HEADER,
        child_observation_header=CHILD_OBSERVATION_HEADER,
    ).strip()
