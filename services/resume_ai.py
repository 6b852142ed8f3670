import json
import re
import logging
from typing import Dict, List

import google.generativeai as genai
from openai import OpenAI

from services.resume_formatter import format_resume_text
from services.resume_parser import extract_skills

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You tailor resumes to job descriptions. Respond with ONLY a JSON object "
    "with the keys: summary (string), tailoredResume (string or object of "
    "section name to text or list of bullets), emphasizedSkills (list of "
    "strings), suggestions (list of strings). Never invent experience."
)

NUMBER_PATTERN = re.compile(r'\d')


class AIProviderError(Exception):
    """Raised when the LLM provider fails or returns unusable output"""


class ResumeAI:
    """Tailor resumes to a job description with an LLM, or by rules when none is configured"""

    def __init__(self, config):
        self.provider = (config.get('AI_PROVIDER') or 'none').lower()
        self.client = None
        self.model = None

        if self.provider == 'openai' and config.get('OPENAI_API_KEY'):
            self.client = OpenAI(api_key=config['OPENAI_API_KEY'])
            self.model = config.get('OPENAI_MODEL', 'gpt-4o-mini')
        elif self.provider == 'gemini' and config.get('GEMINI_API_KEY'):
            genai.configure(api_key=config['GEMINI_API_KEY'])
            self.client = genai.GenerativeModel(config.get('GEMINI_MODEL', 'gemini-1.5-flash'))
        else:
            self.provider = 'rule-based'

    @property
    def use_ai(self):
        return self.client is not None

    def tailor_resume(self, resume_text: str, job_description: str) -> Dict:
        if self.use_ai:
            try:
                result = self._ai_tailor(resume_text, job_description)
                result['provider'] = self.provider
                return result
            except Exception as e:
                logger.warning(f"AI tailoring failed: {e}. Falling back to rule-based tailoring.")

        result = self._rule_based_tailor(resume_text, job_description)
        result['provider'] = 'rule-based'
        return result

    def _ai_tailor(self, resume_text: str, job_description: str) -> Dict:
        user_content = f"Job description:\n{job_description}\n\nResume:\n{resume_text}"

        if self.provider == 'openai':
            response = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_content}
                ],
                temperature=0.3,
                max_tokens=2000,
                response_format={"type": "json_object"}
            )
            raw = response.choices[0].message.content
        else:
            response = self.client.generate_content(f"{SYSTEM_PROMPT}\n\n{user_content}")
            raw = response.text

        return self._parse_response(raw)

    def _parse_response(self, text: str) -> Dict:
        """Parse the JSON reply, tolerating markdown code fences"""
        text = (text or '').strip()
        if text.startswith("```json"):
            text = text[7:]
        if text.startswith("```"):
            text = text[3:]
        if text.endswith("```"):
            text = text[:-3]

        try:
            data = json.loads(text.strip())
        except json.JSONDecodeError as e:
            raise AIProviderError(f"Provider returned invalid JSON: {e}") from e
        if not isinstance(data, dict):
            raise AIProviderError("Provider returned a non-object response")

        return {
            'summary': str(data.get('summary') or ''),
            'tailoredResume': data.get('tailoredResume') or '',
            'emphasizedSkills': self._string_list(data.get('emphasizedSkills')),
            'suggestions': self._string_list(data.get('suggestions')),
        }

    @staticmethod
    def _string_list(value) -> List[str]:
        if isinstance(value, str):
            value = [part for part in value.split(',')]
        if not isinstance(value, list):
            return []
        return [str(item).strip() for item in value if str(item).strip()]

    def _rule_based_tailor(self, resume_text: str, job_description: str) -> Dict:
        resume_skills = extract_skills(resume_text)
        job_skills = extract_skills(job_description)

        shared = [skill for skill in job_skills if skill in resume_skills]
        missing = [skill for skill in job_skills if skill not in resume_skills]
        emphasized = shared or resume_skills[:8]

        suggestions = [
            f"Highlight any hands-on experience with {skill}; the job description asks for it."
            for skill in missing[:5]
        ]
        if not NUMBER_PATTERN.search(resume_text):
            suggestions.append("Quantify achievements with numbers (percentages, revenue, time saved).")
        if shared:
            suggestions.append(f"Move {', '.join(shared[:3])} to the top of your skills section.")

        if shared:
            summary = f"Candidate whose experience with {', '.join(shared[:5])} matches this role."
        elif resume_skills:
            summary = f"Candidate with experience in {', '.join(resume_skills[:5])}."
        else:
            summary = "Candidate profile tailored to the target role."

        return {
            'summary': summary,
            'tailoredResume': format_resume_text(resume_text),
            'emphasizedSkills': emphasized,
            'suggestions': suggestions,
        }
