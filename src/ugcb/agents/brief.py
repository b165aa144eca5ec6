"""Brief generation agent: source URL to a five-scene UGC brief."""

from typing import Any, Optional

import requests

from ..config import config
from ..errors import ContentError, ModelRefusalError, StructuralError
from ..models import Brief, normalize_scenes
from ..models.scene import PLACEHOLDER_IMAGE_URL
from ..scraper import extract_text, fetch_page, validate_url
from .base import BaseAgent

SCENE_COUNT = 5
INSUFFICIENT_CONTENT = "Insufficient content provided to generate brief."

SYSTEM_PROMPT = """You are an expert creative director specializing in User Generated Content (UGC) ads.
You write short-form video briefs (TikTok, Instagram Reels) grounded strictly in the material you are given.
You answer with a single valid JSON object and nothing else: no explanations, no markdown."""

BRIEF_SCHEMA = """{{
  "title": "string (Compelling title based on content)",
  "language": "string (Detected language code, e.g. 'da' or 'en')",
  "scenes": [
    {{
      "sceneNumber": "integer (1-{count})",
      "sceneTitle": "string (Short, descriptive title)",
      "script": "string (Brief script/action)",
      "tone": ["string (One or more of: {tones})"],
      "timeSeconds": "number (Estimated duration)",
      "visual": {{
        "description": "string (Visual description)",
        "imageUrl": "string ({placeholder})"
      }}
    }}
  ]
}}"""


class BriefAgent(BaseAgent[str, Brief]):
    """Agent that turns a web page into a validated UGC brief.

    Each step is a hard failure boundary: the URL is validated, the page is
    fetched and reduced to text, the model is asked for exactly five scenes,
    and the reply is parsed and checked before a Brief is returned. Nothing
    is retried and nothing is persisted here.
    """

    def __init__(self, *args, session: Optional[requests.Session] = None, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._session = session

    @property
    def name(self) -> str:
        """Return the agent's name."""
        return "BriefAgent"

    @property
    def system_prompt(self) -> str:
        """Return the system prompt for brief generation."""
        return SYSTEM_PROMPT

    def run(self, input_data: str) -> Brief:
        """Generate a brief from the page at ``input_data``.

        Args:
            input_data: Absolute URL of the source page.

        Returns:
            A validated Brief with five re-sequenced scenes.

        Raises:
            InputValidationError: If the URL is malformed.
            FetchError: If the page cannot be fetched.
            ContentError: If the page has too little text, or the model
                reports the content as insufficient (ModelRefusalError).
            ModelError: If the model call fails.
            ParseError: If the reply holds no JSON object.
            StructuralError: If the JSON does not have the shape of a brief.
        """
        url = validate_url(input_data)
        self._logger.info(f"Generating brief for: {url}")

        html = fetch_page(url, session=self._session)
        page_text = extract_text(html)
        if len(page_text) < config.min_text_length:
            self._logger.warning(f"Extracted text too short ({len(page_text)} chars) from {url}")
            raise ContentError(
                "Could not extract sufficient text content from the provided URL."
            )
        self._logger.info(f"Extracted text length: {len(page_text)}")

        data = self._request_json(self._build_prompt(page_text))
        brief = self._to_brief(data)
        brief.source_url = url
        self._logger.info(f"Generated brief '{brief.title}' ({brief.language})")
        return brief

    def _build_prompt(self, page_text: str) -> str:
        """Build the user prompt for brief generation."""
        schema = BRIEF_SCHEMA.format(
            count=SCENE_COUNT,
            tones=", ".join(config.tone_vocabulary),
            placeholder=PLACEHOLDER_IMAGE_URL.format(number="[Number]"),
        )
        prompt_parts = [
            "Based *only* on the following text content scraped from a webpage:",
            "--- START SCRAPED TEXT ---",
            page_text,
            "--- END SCRAPED TEXT ---",
            "",
            f"Task: Generate a concise {SCENE_COUNT}-scene UGC ad brief.",
            "",
            "Instructions:",
            "1. Analyze the main topic, product(s), or service described in the scraped text.",
            "2. Create a compelling title for the UGC ad brief based on the content.",
            "3. Detect the primary language of the text and specify its code (e.g. 'da', 'en').",
            f"4. Develop a logical {SCENE_COUNT}-scene storyboard for a short video ad.",
            "5. For each scene, provide sceneNumber, sceneTitle, script, tone, "
            "timeSeconds and a visual description.",
            f"6. For visual imageUrl, use the placeholder "
            f"\"{PLACEHOLDER_IMAGE_URL.format(number='[Number]')}\" with the scene number filled in.",
            "7. Format the entire output as a single, valid JSON object conforming exactly "
            "to this structure, with no text outside the JSON:",
            schema,
            "",
            "If the provided text is insufficient to generate a meaningful brief, return a "
            f"JSON object with only an \"error\" key: {{\"error\": \"{INSUFFICIENT_CONTENT}\"}}",
        ]
        return "\n".join(prompt_parts)

    def _to_brief(self, data: dict[str, Any]) -> Brief:
        """Structurally validate the model's JSON and build the brief."""
        if data.get("error"):
            message = data["error"]
            self._logger.warning(f"Model declined to generate a brief: {message}")
            raise ModelRefusalError(str(message))

        self._check_shape(data)

        brief = Brief(
            title=data["title"].strip(),
            language=data["language"].strip(),
            scenes=normalize_scenes(data["scenes"]),
        )
        brief.validate_complete()
        return brief

    @staticmethod
    def _check_shape(data: dict[str, Any]) -> None:
        missing = [
            key for key in ("title", "language")
            if not isinstance(data.get(key), str) or not data[key].strip()
        ]
        if missing:
            raise StructuralError(
                f"Generated brief structure is invalid: missing {', '.join(missing)}."
            )

        scenes = data.get("scenes")
        if not isinstance(scenes, list):
            raise StructuralError("Generated brief structure is invalid: no scenes array.")
        if len(scenes) != SCENE_COUNT:
            raise StructuralError(
                f"Generated brief structure is invalid: expected {SCENE_COUNT} scenes, "
                f"got {len(scenes)}."
            )


def generate_brief(url: str, agent: Optional[BriefAgent] = None) -> Brief:
    """Generate a brief from ``url`` with a default or given agent."""
    return (agent or BriefAgent()).run(url)
