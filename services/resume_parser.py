import io
import re
import logging
from typing import Dict, List, Optional

import PyPDF2
import docx

logger = logging.getLogger(__name__)

ANALYZABLE_EXTENSIONS = {'pdf', 'docx', 'txt'}

# Canonical skill -> spellings found in resumes and job descriptions
SKILL_PATTERNS = {
    # Programming Languages
    'Python': ['python'],
    'Java': ['java'],
    'JavaScript': ['javascript', 'js', 'ecmascript'],
    'TypeScript': ['typescript'],
    'C++': ['c++', 'cpp'],
    'C#': ['c#', 'csharp'],
    'PHP': ['php'],
    'Ruby': ['ruby', 'rails'],
    'Go': ['golang'],
    'Rust': ['rust'],
    'Swift': ['swift'],
    'Kotlin': ['kotlin'],
    'SQL': ['sql'],

    # Web Technologies
    'React': ['react', 'reactjs', 'react.js'],
    'Angular': ['angular', 'angularjs'],
    'Vue': ['vue', 'vuejs', 'vue.js'],
    'Node.js': ['node', 'nodejs', 'node.js'],
    'Express': ['express', 'expressjs', 'express.js'],
    'Django': ['django'],
    'Flask': ['flask'],
    'FastAPI': ['fastapi'],
    'Spring': ['spring', 'spring boot'],
    'HTML': ['html', 'html5'],
    'CSS': ['css', 'css3'],

    # Databases
    'MySQL': ['mysql'],
    'PostgreSQL': ['postgresql', 'postgres'],
    'MongoDB': ['mongodb', 'mongo'],
    'Redis': ['redis'],
    'SQLite': ['sqlite'],

    # Cloud & DevOps
    'AWS': ['aws', 'amazon web services'],
    'Azure': ['azure'],
    'GCP': ['gcp', 'google cloud'],
    'Docker': ['docker'],
    'Kubernetes': ['kubernetes', 'k8s'],
    'CI/CD': ['ci/cd', 'continuous integration'],
    'Terraform': ['terraform'],
    'Git': ['git', 'github', 'gitlab'],
    'Linux': ['linux', 'unix'],

    # API & Architecture
    'REST API': ['rest api', 'restful', 'rest apis'],
    'GraphQL': ['graphql'],
    'Microservices': ['microservices', 'microservice'],

    # Data & ML
    'Machine Learning': ['machine learning'],
    'Deep Learning': ['deep learning', 'neural networks'],
    'TensorFlow': ['tensorflow'],
    'PyTorch': ['pytorch'],
    'Pandas': ['pandas'],
    'NumPy': ['numpy'],
    'Excel': ['excel'],
    'Tableau': ['tableau'],

    # Testing
    'Jest': ['jest'],
    'Pytest': ['pytest'],
    'Selenium': ['selenium'],

    # Security
    'Cybersecurity': ['cybersecurity', 'cyber security', 'information security'],

    # Methodologies & tools
    'Agile': ['agile', 'scrum', 'kanban'],
    'JIRA': ['jira'],
    'Communication': ['communication'],
    'Leadership': ['leadership'],
}

EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
PHONE_PATTERN = re.compile(r'(\+?\d{1,3}[-.\s]?)?\(?\d{3}\)?[-.\s]?\d{3}[-.\s]?\d{4}')
EXPERIENCE_PATTERN = re.compile(r'(\d+(?:\.\d+)?)\s*\+?\s*years?')


class ResumeParseError(Exception):
    """Raised when a resume cannot be read"""


def _skill_regex(pattern):
    return re.compile(r'(?<![a-z0-9])' + re.escape(pattern) + r'(?![a-z0-9])')


_COMPILED_SKILLS = {
    skill: [_skill_regex(p) for p in patterns] for skill, patterns in SKILL_PATTERNS.items()
}


def extract_skills(text: str) -> List[str]:
    """Canonical skill names mentioned in ``text``, sorted"""
    text_lower = (text or '').lower()
    found = {
        skill for skill, regexes in _COMPILED_SKILLS.items()
        if any(regex.search(text_lower) for regex in regexes)
    }
    return sorted(found)


class ResumeParser:
    """Parse uploaded resumes and extract structured data"""

    def parse(self, data: bytes, filename: str) -> Dict:
        text = self.extract_text(data, filename)
        if not text.strip():
            raise ResumeParseError('No readable text found in resume')

        skills = extract_skills(text)
        logger.debug(f"Extracted {len(skills)} skills from {filename}")
        return {
            'text': text,
            'skills': skills,
            'email': self._extract_email(text),
            'phone': self._extract_phone(text),
            'experience_years': self._extract_experience_years(text),
            'education_level': self._extract_education(text),
        }

    def extract_text(self, data: bytes, filename: str) -> str:
        extension = filename.rsplit('.', 1)[-1].lower() if '.' in filename else ''
        if extension not in ANALYZABLE_EXTENSIONS:
            raise ResumeParseError(f"Unsupported file format: .{extension or '?'}")

        try:
            if extension == 'pdf':
                return self._extract_pdf(data)
            if extension == 'docx':
                return self._extract_docx(data)
            return data.decode('utf-8', errors='replace')
        except ResumeParseError:
            raise
        except Exception as e:
            raise ResumeParseError(f"Error reading resume: {str(e)}") from e

    def _extract_pdf(self, data: bytes) -> str:
        reader = PyPDF2.PdfReader(io.BytesIO(data))
        pages = [page.extract_text() or '' for page in reader.pages]
        return '\n'.join(pages).strip()

    def _extract_docx(self, data: bytes) -> str:
        document = docx.Document(io.BytesIO(data))
        return '\n'.join(para.text for para in document.paragraphs).strip()

    def _extract_email(self, text: str) -> Optional[str]:
        match = EMAIL_PATTERN.search(text)
        return match.group(0) if match else None

    def _extract_phone(self, text: str) -> Optional[str]:
        match = PHONE_PATTERN.search(text)
        return match.group(0).strip() if match else None

    def _extract_experience_years(self, text: str) -> float:
        """Highest 'N years' figure mentioned"""
        matches = EXPERIENCE_PATTERN.findall(text.lower())
        if matches:
            return max(float(m) for m in matches)
        return 0.0

    def _extract_education(self, text: str) -> str:
        text_lower = text.lower()

        if any(word in text_lower for word in ['phd', 'ph.d', 'doctorate']):
            return 'PhD'
        elif any(word in text_lower for word in ['master', 'mba', 'm.sc']):
            return 'Masters'
        elif any(word in text_lower for word in ['bachelor', 'b.sc', 'b.a.', 'b.s.']):
            return 'Bachelors'
        elif any(word in text_lower for word in ['associate', 'certificate', 'diploma']):
            return 'Associate/Certificate'

        return 'Unknown'
