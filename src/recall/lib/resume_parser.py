"""Parse resume text into structured records with the chat model."""

import logging

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from recall.lib.errors import ProviderError
from recall.lib.providers.base import Completer
from recall.lib.unstructured_converter import extract_json_object
from recall.models.llm import ChatMessage, ChatOptions

logger = logging.getLogger(__name__)

RESUME_PROMPT_TEMPLATE = """You are an expert resume parser for a JSON-based \
vector database.
Extract the following structured data from the resume text below and return \
it as a VALID JSON object.
Do not include any markdown formatting (like ```json). Just the raw JSON string.

Structure:
{{
  "education": [{{"institution": "...", "degree": "...", "year": "..."}}],
  "experience": [
    {{"company": "...", "role": "...", "duration": "...", "details": ["..."]}}
  ],
  "projects": [
    {{"name": "...", "technologies": ["..."], "description": "..."}}
  ],
  "skills": [
    {{"category": "Languages/Frameworks/Tools", "items": ["..."]}}
  ]
}}

Resume Text:
{text}
"""


class Experience(BaseModel):
    """One position held."""

    company: str = ""
    role: str = ""
    duration: str = ""
    details: list[str] = Field(default_factory=list)

    @property
    def start(self) -> str:
        """Start of the duration range, e.g. "2021" for "2021 - Present"."""
        return self.duration.split("-")[0].strip()


class Project(BaseModel):
    """A project with its technology stack."""

    name: str = ""
    technologies: list[str] = Field(default_factory=list)
    description: str = ""


class SkillCategory(BaseModel):
    """Skills grouped under a category such as "Languages"."""

    category: str = ""
    items: list[str] = Field(default_factory=list)


class ResumeData(BaseModel):
    """Structured resume content.

    Education entries are kept as free-form mappings because models vary
    the keys they return for them.
    """

    model_config = ConfigDict(extra="ignore")

    education: list[dict[str, object]] = Field(default_factory=list)
    experience: list[Experience] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)
    skills: list[SkillCategory] = Field(default_factory=list)


class ResumeParser:
    """Extracts ResumeData from resume text."""

    def __init__(self, completer: Completer) -> None:
        self._completer = completer

    async def parse(self, text: str) -> ResumeData | None:
        """Parse resume text.

        Args:
            text: Plain text extracted from the resume.

        Returns:
            Parsed resume, or None if the model failed or returned an
            unusable response.
        """
        prompt = RESUME_PROMPT_TEMPLATE.format(text=text)
        try:
            response = await self._completer.chat(
                [ChatMessage(role="user", content=prompt)],
                ChatOptions(format="json"),
            )
            return ResumeData.model_validate(extract_json_object(response.content))
        except (ProviderError, ValueError, ValidationError) as e:
            logger.error(f"Resume parsing failed: {e}")
            return None
