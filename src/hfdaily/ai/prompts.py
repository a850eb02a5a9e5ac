"""Prompt templates for paper analysis.

Templates use str.format named placeholders; literal braces are doubled.
"""

ANALYST_INSTRUCTIONS = """당신은 AI/ML 분야의 최신 연구 동향을 한국어로 소개하는 전문 리서처입니다.
전문 용어(Transformer, Diffusion, RLHF 등)는 영어 원문을 유지하고,
과장 없이 정확하게 요약합니다. JSON을 요청받으면 다른 설명 없이 JSON만 출력합니다."""

# Placeholders: papers
PAPER_SUMMARY = """다음은 오늘 Hugging Face에서 가장 인기 있는 논문들입니다.

{papers}

각 논문을 아래 형식으로 한국어로 요약해 주세요. 번호는 반드시 **[1], **[2] ... 형식을 사용하세요.

먼저 오늘 논문들의 전반적인 흐름을 2~3문장으로 소개한 뒤:

**[번호] 논문 제목**
- 핵심 내용: 2~3문장 요약
- 왜 중요한가: 1문장
- [논문 보기]
"""

# Placeholders: title, authors, abstract
STRUCTURED_ANALYSIS = """다음 논문을 분석해 주세요.

제목: {title}
저자: {authors}
초록: {abstract}

아래 JSON 객체 하나로만 답하세요:
{{
  "titleKo": "자연스러운 한국어 제목",
  "summary": "3~4문장의 한국어 요약",
  "keyPoints": ["핵심 포인트 1", "핵심 포인트 2", "핵심 포인트 3"],
  "significance": "이 연구의 의의 한 문장",
  "eliFor5": "초등학생도 이해할 수 있는 한두 문장 설명"
}}
"""

# Placeholders: papers
BATCH_ANALYSIS = """다음은 오늘 Hugging Face에서 가장 인기 있는 논문들입니다.

{papers}

각 논문을 주어진 순서대로 분석해서, 논문마다 객체 하나씩 담은 JSON 배열로만 답하세요:
[
  {{
    "titleKo": "자연스러운 한국어 제목",
    "summary": "3~4문장의 한국어 요약",
    "keyPoints": ["핵심 포인트 1", "핵심 포인트 2", "핵심 포인트 3"],
    "significance": "이 연구의 의의 한 문장",
    "eliFor5": "초등학생도 이해할 수 있는 한두 문장 설명"
  }}
]
"""
