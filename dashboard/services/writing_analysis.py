"""
Gamified writing analysis via Anthropic Claude.

Text in, structured JSON out. The reply is expected to contain a single JSON
object; anything around it (prose, markdown fences) is ignored.
"""

import json
import logging
import re

import anthropic

from dashboard.config import config

logger = logging.getLogger(__name__)

MAX_TOKENS = 1000
REQUIRED_FIELDS = ('writerLevel', 'xpGained', 'writingPowers')

ANALYSIS_PROMPT = """You are a Writing Adventure Guide giving a student playful, encouraging feedback on their writing. Analyze the writing sample below and report in this gamified format.

Writer Level Assessment:
- Overall writer level (1-10), judged against grade-appropriate skills
- Total XP earned (100-1000), built from:
  * Depth and complexity of ideas (up to 200 XP)
  * Use of evidence and examples (up to 150 XP)
  * Organization and structure (up to 150 XP)
  * Style and voice (up to 125 XP)
  * Grammar and mechanics (up to 125 XP)
  * Vocabulary and word choice (up to 125 XP)
  * Creativity and originality (up to 125 XP)

Writing Powers:
- Name 2-3 real strengths of this piece
- Give each an epic name (e.g. "Dragon's Voice", "Story Weaver's Grace") and a mastery level from 1 to 5
- Quote examples from the text that show the power in action, with encouraging feedback

Quest Progress:
- Main quest (the kind of writing) and a progress percentage
- Three achievements earned, based on actual strengths in the writing

Magical Elements:
- 3-4 literary devices used (metaphor, simile, personification, ...)
- Rate each as Apprentice, Adept, Master or Legendary and quote the example

Next Quests:
- Three areas to improve, framed as side quests with a reward and a tactical hint

Respond with a JSON object of exactly this shape:

{
"writerLevel": number,
"xpGained": number,
"writingPowers": [{"name": string, "level": number, "description": string, "examples": string[]}],
"questProgress": {"mainQuest": string, "progress": number, "achievements": string[]},
"magicalElements": {"spells": [{"name": string, "power": string, "example": string}]},
"nextQuests": [{"title": string, "reward": string, "hint": string}]
}

Writing sample to analyze:
"""

_JSON_OBJECT = re.compile(r'\{[\s\S]*\}')


class AnalysisError(Exception):
    """The model reply could not be turned into a valid analysis."""

    def __init__(self, message, raw_response=None):
        super().__init__(message)
        self.raw_response = raw_response


def _get_anthropic_client():
    if not config.anthropic_api_key:
        raise RuntimeError("ANTHROPIC_API_KEY not configured")
    return anthropic.Anthropic(api_key=config.anthropic_api_key)


def parse_analysis(response_text):
    """Pull the JSON object out of a model reply and check the required fields."""
    match = _JSON_OBJECT.search(response_text or '')
    if not match:
        raise AnalysisError("No JSON found in response", raw_response=response_text)

    try:
        result = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Invalid JSON in response: {e}", raw_response=response_text) from e

    if not isinstance(result, dict):
        raise AnalysisError("Analysis is not a JSON object", raw_response=response_text)

    missing = [field for field in REQUIRED_FIELDS if not result.get(field)]
    if missing:
        raise AnalysisError(
            "Invalid response structure - missing required fields: " + ", ".join(missing),
            raw_response=response_text,
        )
    return result


def analyze_writing(text, client=None, model=None):
    """Send ``text`` to Claude and return the parsed analysis dict."""
    if not text or not text.strip():
        raise ValueError("No text provided for analysis")

    client = client or _get_anthropic_client()
    response = client.messages.create(
        model=model or config.analysis_model,
        max_tokens=MAX_TOKENS,
        messages=[{"role": "user", "content": ANALYSIS_PROMPT + text}],
    )
    response_text = response.content[0].text
    logger.debug("Raw analysis response: %s", response_text)

    result = parse_analysis(response_text)
    logger.info("Writing analysis complete: level=%s xp=%s", result.get('writerLevel'), result.get('xpGained'))
    return result
