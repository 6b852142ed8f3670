"""
Remote job listings from the Remotive public API.

Listings are mapped to the job card shape the frontend renders:
{id, title, company, location, link, salary, type, description, publishedAt}
"""
import logging
from typing import Dict, List, Optional

import requests
from bs4 import BeautifulSoup

from extensions import cache_get, cache_set

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 300
USER_AGENT = 'JobTrail/1.0'


class JobFeedError(Exception):
    """Raised when the listings feed cannot be fetched or parsed"""


def html_to_text(html: Optional[str], limit: int = DESCRIPTION_LIMIT) -> str:
    """Strip tags and collapse whitespace, truncating on a word boundary"""
    if not html:
        return ''
    text = ' '.join(BeautifulSoup(html, 'html.parser').get_text(' ').split())
    if len(text) <= limit:
        return text
    return text[:limit].rsplit(' ', 1)[0] + '…'


def map_listing(item: Dict) -> Dict:
    return {
        'id': item.get('id'),
        'title': item.get('title') or 'Untitled role',
        'company': item.get('company_name') or 'Unknown company',
        'location': item.get('candidate_required_location') or 'Remote',
        'link': item.get('url') or '',
        'salary': item.get('salary') or '',
        'type': (item.get('job_type') or '').replace('_', ' '),
        'description': html_to_text(item.get('description')),
        'publishedAt': item.get('publication_date')
    }


def fetch_jobs(feed_url: str, search: Optional[str] = None, category: Optional[str] = None,
               limit: int = 20, timeout: int = 10, cache_ttl: int = 300) -> List[Dict]:
    cache_key = f"jobs:{search or ''}:{category or ''}:{limit}"
    cached = cache_get(cache_key)
    if cached is not None:
        return cached

    params = {'limit': limit}
    if search:
        params['search'] = search
    if category:
        params['category'] = category

    try:
        response = requests.get(feed_url, params=params, timeout=timeout,
                                headers={'User-Agent': USER_AGENT})
        response.raise_for_status()
        payload = response.json()
    except (requests.RequestException, ValueError) as e:
        logger.error(f"Job feed fetch error: {e}")
        raise JobFeedError('Error fetching job listings') from e

    listings = payload.get('jobs') if isinstance(payload, dict) else None
    if not isinstance(listings, list):
        logger.error(f"Job feed returned an unexpected payload: {type(payload).__name__}")
        raise JobFeedError('Error fetching job listings')

    jobs = [map_listing(item) for item in listings if isinstance(item, dict)][:limit]
    cache_set(cache_key, jobs, expire=cache_ttl)
    return jobs
