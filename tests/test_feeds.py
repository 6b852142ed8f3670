"""
Test job listings and news feeds
"""
import pytest
import requests
from unittest.mock import patch, MagicMock
from services.job_feed import html_to_text, map_listing, fetch_jobs, JobFeedError
from services.news_feed import parse_rss, fetch_news, NewsFeedError
from utils.job_cards import render_job_card

REMOTIVE_PAYLOAD = {
    'job-count': 2,
    'jobs': [
        {
            'id': 101,
            'url': 'https://remotive.com/remote-jobs/software-dev/backend-101',
            'title': 'Backend Engineer',
            'company_name': 'CloudCore',
            'job_type': 'full_time',
            'publication_date': '2024-03-01T10:00:00',
            'candidate_required_location': 'USA Only',
            'salary': '$120k',
            'description': '<p>Build <b>APIs</b> in Python.</p>'
        },
        {
            'id': 102,
            'url': 'https://remotive.com/remote-jobs/design/designer-102',
            'title': 'Product <Designer>',
            'company_name': '',
            'job_type': 'contract',
            'description': None
        }
    ]
}

RSS_FEED = b"""<?xml version="1.0"?>
<rss version="2.0"><channel><title>Career News</title>
<item><title>Hiring rebounds</title><link>https://news.example.com/1</link><pubDate>Mon, 01 Apr 2024</pubDate></item>
<item><title>Remote work trends</title><link>https://news.example.com/2</link></item>
<item><title>Third</title><link>https://news.example.com/3</link></item>
</channel></rss>"""


def mock_response(json_data=None, content=b'', status=200):
    response = MagicMock()
    response.json.return_value = json_data
    response.content = content
    if status >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(f'{status} error')
    return response


class TestJobFeed:

    def test_html_to_text(self):
        assert html_to_text('<p>Hello   <b>world</b></p>') == 'Hello world'
        assert html_to_text(None) == ''

    def test_html_to_text_truncates_on_word(self):
        text = html_to_text('word ' * 100, limit=22)
        assert text == 'word word word word…'

    def test_map_listing(self):
        job = map_listing(REMOTIVE_PAYLOAD['jobs'][0])

        assert job == {
            'id': 101,
            'title': 'Backend Engineer',
            'company': 'CloudCore',
            'location': 'USA Only',
            'link': 'https://remotive.com/remote-jobs/software-dev/backend-101',
            'salary': '$120k',
            'type': 'full time',
            'description': 'Build APIs in Python.',
            'publishedAt': '2024-03-01T10:00:00'
        }

    def test_map_listing_defaults(self):
        job = map_listing(REMOTIVE_PAYLOAD['jobs'][1])

        assert job['company'] == 'Unknown company'
        assert job['location'] == 'Remote'
        assert job['description'] == ''

    @patch('services.job_feed.requests.get')
    def test_fetch_jobs_passes_filters(self, mock_get):
        mock_get.return_value = mock_response(REMOTIVE_PAYLOAD)

        jobs = fetch_jobs('https://remotive.test/api', search='python', category='software-dev', limit=1)

        assert len(jobs) == 1
        _, kwargs = mock_get.call_args
        assert kwargs['params'] == {'limit': 1, 'search': 'python', 'category': 'software-dev'}

    @patch('services.job_feed.requests.get')
    def test_fetch_jobs_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError('down')

        with pytest.raises(JobFeedError):
            fetch_jobs('https://remotive.test/api')

    @pytest.mark.parametrize('payload', [
        {'jobs': None},
        [REMOTIVE_PAYLOAD['jobs'][0]],
        {'message': 'rate limited'},
    ])
    @patch('services.job_feed.requests.get')
    def test_fetch_jobs_unexpected_payload(self, mock_get, payload):
        mock_get.return_value = mock_response(payload)

        with pytest.raises(JobFeedError):
            fetch_jobs('https://remotive.test/api')

    @patch('services.job_feed.requests.get')
    def test_fetch_jobs_skips_non_object_listings(self, mock_get):
        mock_get.return_value = mock_response({'jobs': ['junk', REMOTIVE_PAYLOAD['jobs'][0], None]})

        jobs = fetch_jobs('https://remotive.test/api')

        assert [job['id'] for job in jobs] == [101]

    def test_job_card_escapes(self):
        html = render_job_card({'title': '<script>x</script>', 'company': 'A&B', 'link': 'https://x.test/?a=1&b=2'})

        assert '<script>' not in html
        assert 'A&amp;B' in html
        assert 'href="https://x.test/?a=1&amp;b=2"' in html


class TestNewsFeed:

    def test_parse_rss(self):
        articles = parse_rss(RSS_FEED, limit=2)

        assert articles == [
            {'title': 'Hiring rebounds', 'link': 'https://news.example.com/1', 'pubDate': 'Mon, 01 Apr 2024'},
            {'title': 'Remote work trends', 'link': 'https://news.example.com/2', 'pubDate': None}
        ]

    @patch('services.news_feed.requests.get')
    def test_fetch_news_bad_xml(self, mock_get):
        mock_get.return_value = mock_response(content=b'<not xml')

        with pytest.raises(NewsFeedError):
            fetch_news('https://news.test/rss')


class TestFeedRoutes:

    @patch('services.job_feed.requests.get')
    def test_jobs_endpoint(self, mock_get, client):
        mock_get.return_value = mock_response(REMOTIVE_PAYLOAD)

        response = client.get('/api/jobs?search=python&limit=500')

        assert response.status_code == 200
        data = response.get_json()
        assert data['total'] == 2
        assert 'html' not in data
        _, kwargs = mock_get.call_args
        assert kwargs['params']['limit'] == 100

    @patch('services.job_feed.requests.get')
    def test_jobs_endpoint_html(self, mock_get, client):
        mock_get.return_value = mock_response(REMOTIVE_PAYLOAD)

        data = client.get('/api/jobs?format=html').get_json()

        assert data['html'].count('class="job-card"') == 2
        assert 'Product &lt;Designer&gt;' in data['html']

    @patch('services.job_feed.requests.get')
    def test_jobs_endpoint_upstream_failure(self, mock_get, client):
        mock_get.return_value = mock_response(status=503)

        response = client.get('/api/jobs')
        assert response.status_code == 502

    @patch('services.job_feed.requests.get')
    def test_jobs_endpoint_malformed_feed(self, mock_get, client):
        mock_get.return_value = mock_response({'jobs': None})

        response = client.get('/api/jobs')

        assert response.status_code == 502
        assert response.get_json() == {'error': 'Error fetching job listings'}

    def test_suggestions_require_login(self, client, auth_headers):
        assert client.get('/api/jobs/suggestions').status_code == 401

        suggestions = client.get('/api/jobs/suggestions', headers=auth_headers).get_json()['suggestions']
        assert len(suggestions) == 5

    @patch('services.news_feed.requests.get')
    def test_news_endpoint(self, mock_get, client):
        mock_get.return_value = mock_response(content=RSS_FEED)

        response = client.get('/api/news')

        assert response.status_code == 200
        assert len(response.get_json()['articles']) == 3

    @patch('services.news_feed.requests.get')
    def test_news_endpoint_failure(self, mock_get, client):
        mock_get.side_effect = requests.Timeout('slow')

        response = client.get('/api/news')

        assert response.status_code == 502
        assert response.get_json() == {'error': 'Error fetching news'}
