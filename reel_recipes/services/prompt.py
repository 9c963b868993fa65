from __future__ import annotations

SYSTEM_PROMPT = """You are a recipe extraction assistant. Extract recipe information from \
transcripts and return ONLY valid JSON with this exact structure:
{
  "title": "Recipe name",
  "ingredients": ["ingredient 1", "ingredient 2"],
  "steps": ["step 1", "step 2"],
  "duration": "X minutes",
  "category": "cuisine type"
}
Use one string per ingredient line and per step. Omit "duration" or "category" \
when the transcript does not mention them. Do not add any other keys."""


def build_user_prompt(transcript: str) -> str:
    return f"Extract the recipe from this video transcript:\n\n{transcript.strip()}"
