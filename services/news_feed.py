import logging
import xml.etree.ElementTree as ET
from typing import Dict, List

import requests

from extensions import cache_get, cache_set

logger = logging.getLogger(__name__)


class NewsFeedError(Exception):
    """Raised when the news RSS feed cannot be fetched or parsed"""


def _text(item, tag):
    elem = item.find(tag)
    return elem.text.strip() if elem is not None and elem.text else None


def parse_rss(xml_data: bytes, limit: int = 10) -> List[Dict]:
    root = ET.fromstring(xml_data)
    articles = []
    for item in root.findall('.//item'):
        if len(articles) >= limit:
            break
        articles.append({
            'title': _text(item, 'title'),
            'link': _text(item, 'link'),
            'pubDate': _text(item, 'pubDate')
        })
    return articles


def fetch_news(feed_url: str, limit: int = 10, timeout: int = 10, cache_ttl: int = 300) -> List[Dict]:
    cache_key = f"news:{limit}"
    cached = cache_get(cache_key)
    if cached is not None:
        return cached

    try:
        response = requests.get(feed_url, timeout=timeout, headers={'User-Agent': 'JobTrail/1.0'})
        response.raise_for_status()
        articles = parse_rss(response.content, limit)
    except (requests.RequestException, ET.ParseError) as e:
        logger.error(f"News fetch error: {e}")
        raise NewsFeedError('Error fetching news') from e

    cache_set(cache_key, articles, expire=cache_ttl)
    return articles
