from flask import Blueprint, jsonify, current_app
from services.news_feed import fetch_news, NewsFeedError

news_bp = Blueprint('news', __name__)


@news_bp.route('', methods=['GET'])
def get_news():
    try:
        articles = fetch_news(
            current_app.config['NEWS_FEED_URL'],
            limit=current_app.config['NEWS_LIMIT'],
            timeout=current_app.config['HTTP_TIMEOUT'],
            cache_ttl=current_app.config['CACHE_TTL']
        )
    except NewsFeedError:
        return jsonify({'error': 'Error fetching news'}), 502

    return jsonify({'articles': articles}), 200
