"""
Contact-detail scraping for business websites.

Pulls the first usable email address plus Facebook and Instagram profile
links out of a page. Extraction prefers structured sources (mailto links,
data attributes, meta tags, scripts) over free text and raw HTML.
"""
import ipaddress
import logging
import re
import socket
import time
from urllib.parse import urljoin, urlparse

import requests
from bs4 import BeautifulSoup
from django.conf import settings

logger = logging.getLogger('backend.prospecting')

NOT_AVAILABLE = 'N/A'

USER_AGENT = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

EMAIL_RE = re.compile(r'[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}')
OBFUSCATED_EMAIL_RES = [
    re.compile(r'([a-zA-Z0-9._%+-]+)\s*\[\s*at\s*\]\s*([a-zA-Z0-9.-]+)\s*\[\s*dot\s*\]\s*([a-zA-Z]{2,})', re.IGNORECASE),
    re.compile(r'([a-zA-Z0-9._%+-]+)\s*\(\s*at\s*\)\s*([a-zA-Z0-9.-]+)\s*\(\s*dot\s*\)\s*([a-zA-Z]{2,})', re.IGNORECASE),
]
IGNORED_EMAIL_MARKERS = (
    'example.com', 'test.com', 'placeholder', 'your-email', 'youremail', 'email@domain',
    'noreply', 'no-reply', 'donotreply', 'sentry',
)
IMAGE_SUFFIXES = ('.png', '.jpg', '.jpeg', '.gif', '.svg', '.webp')
EMAIL_ATTRIBUTES = ('data-email', 'data-mail', 'data-contact-email')

FACEBOOK_RE = re.compile(
    r'(?:https?://)?(?:www\.|m\.|web\.)?(?:facebook\.com|fb\.com)/(profile\.php\?id=\d+|[A-Za-z0-9._-]+)',
    re.IGNORECASE,
)
FACEBOOK_EXCLUDED = {
    'sharer', 'sharer.php', 'share', 'share.php', 'dialog', 'plugins', 'tr', 'login', 'login.php',
    'events', 'groups', 'watch', 'hashtag', 'policies', 'privacy', 'help', 'pages', 'photo.php',
}
FACEBOOK_EXCLUDED_MARKERS = ('share', 'plugin', 'widget', 'dialog')

INSTAGRAM_RE = re.compile(r'(?:https?://)?(?:www\.)?instagram\.com/([A-Za-z0-9_.]+)', re.IGNORECASE)
INSTAGRAM_EXCLUDED = {
    'p', 'reel', 'reels', 'tv', 'explore', 'accounts', 'about', 'blog', 'share', 'stories',
    'developer', 'legal', 'embed.js', 'static',
}

LINK_ATTRIBUTES = ('href', 'data-href', 'data-url', 'data-facebook', 'data-fb', 'data-instagram', 'data-ig', 'content')

MAX_REDIRECTS = 5


class ScrapeError(Exception):
    """Raised when a page cannot be fetched"""


def normalize_url(url):
    """Trim and default the scheme to https"""
    url = (url or '').strip()
    if url and not url.lower().startswith(('http://', 'https://')):
        url = f'https://{url}'
    return url


def is_usable_email(email):
    email = email.lower()
    if len(email) <= 5 or email.count('@') != 1:
        return False
    domain = email.split('@')[1]
    if '.' not in domain:
        return False
    if email.endswith(IMAGE_SUFFIXES):
        return False
    return not any(marker in email for marker in IGNORED_EMAIL_MARKERS)


def _mailto_address(value):
    address = re.sub(r'^mailto:', '', value.strip(), flags=re.IGNORECASE)
    return re.split(r'[?&#]', address)[0].strip()


def _email_candidates(soup, html):
    """Yield candidate addresses, most reliable sources first"""
    for tag in soup.find_all(href=True):
        href = tag['href']
        if 'mailto:' in href.lower():
            yield _mailto_address(href)

    for tag in soup.find_all(attrs={'data-href': True}):
        if 'mailto:' in tag['data-href'].lower():
            yield _mailto_address(tag['data-href'])
    for attribute in EMAIL_ATTRIBUTES:
        for tag in soup.find_all(attrs={attribute: True}):
            yield from EMAIL_RE.findall(tag[attribute])

    for tag in soup.find_all('meta', content=True):
        keys = ' '.join(str(tag.get(key, '')) for key in ('name', 'property', 'itemprop')).lower()
        if 'email' in keys:
            yield from EMAIL_RE.findall(tag['content'])

    for tag in soup.find_all('script'):
        yield from EMAIL_RE.findall(tag.string or '')

    text = soup.get_text(' ')
    yield from EMAIL_RE.findall(text)
    for pattern in OBFUSCATED_EMAIL_RES:
        for user, domain, tld in pattern.findall(text):
            yield f'{user}@{domain}.{tld}'

    yield from EMAIL_RE.findall(html)


def extract_email(soup, html):
    """First usable email on the page, or ''"""
    for candidate in _email_candidates(soup, html):
        candidate = candidate.strip().lower()
        if EMAIL_RE.fullmatch(candidate) and is_usable_email(candidate):
            return candidate
    return ''


def _link_values(soup):
    for attribute in LINK_ATTRIBUTES:
        for tag in soup.find_all(attrs={attribute: True}):
            yield tag[attribute]
    for tag in soup.find_all('script'):
        if tag.string:
            yield tag.string


def _first_profile(values, pattern, normalize):
    for value in values:
        for handle in pattern.findall(value):
            url = normalize(handle)
            if url:
                return url
    return ''


def facebook_profile_url(handle):
    """Canonical profile URL for a facebook.com path, or '' for share/plugin/tracking paths"""
    path = handle.strip().rstrip('.')
    lowered = path.lower()
    if not path or lowered.split('?')[0] in FACEBOOK_EXCLUDED:
        return ''
    if any(marker in lowered for marker in FACEBOOK_EXCLUDED_MARKERS):
        return ''
    return f'https://www.facebook.com/{path}'


def instagram_profile_url(handle):
    """Canonical profile URL for an instagram.com path, or '' for posts and site pages"""
    username = handle.strip().rstrip('.')
    if not username or username.lower() in INSTAGRAM_EXCLUDED:
        return ''
    return f'https://www.instagram.com/{username}'


def extract_facebook(soup, html):
    url = _first_profile(_link_values(soup), FACEBOOK_RE, facebook_profile_url)
    return url or _first_profile([html], FACEBOOK_RE, facebook_profile_url)


def extract_instagram(soup, html):
    url = _first_profile(_link_values(soup), INSTAGRAM_RE, instagram_profile_url)
    return url or _first_profile([html], INSTAGRAM_RE, instagram_profile_url)


def extract_contact_details(html):
    """
    Parse contact details out of an HTML document.

    Returns a dict with `email`, `facebook` and `instagram`; missing
    values are ''.
    """
    html = html or ''
    soup = BeautifulSoup(html, 'html.parser')
    return {
        'email': extract_email(soup, html),
        'facebook': extract_facebook(soup, html),
        'instagram': extract_instagram(soup, html),
    }


def ensure_public_host(url):
    """Raise ScrapeError unless every address the URL's host resolves to is public"""
    host = urlparse(url).hostname
    if not host:
        raise ScrapeError('Invalid URL')
    try:
        addresses = {info[4][0] for info in socket.getaddrinfo(host, None)}
    except socket.gaierror as e:
        raise ScrapeError(f'Could not resolve {host}: {e}')

    for address in addresses:
        if not ipaddress.ip_address(address.split('%')[0]).is_global:
            logger.warning(f"Refused to fetch {url}: {host} resolves to {address}")
            raise ScrapeError(f'Refusing to fetch non-public address for {host}')


def fetch_page(url):
    """
    GET a page and return its HTML; raises ScrapeError on any failure.

    Redirects are followed by hand so every hop passes the public-host check.
    """
    try:
        for _ in range(MAX_REDIRECTS + 1):
            ensure_public_host(url)
            response = requests.get(
                url,
                timeout=settings.SCRAPER_TIMEOUT,
                headers={'User-Agent': USER_AGENT},
                allow_redirects=False,
            )
            if not response.is_redirect:
                response.raise_for_status()
                return response.text
            url = urljoin(url, response.headers['Location'])
        raise ScrapeError(f'Exceeded {MAX_REDIRECTS} redirects')
    except requests.exceptions.Timeout:
        raise ScrapeError(f'Timed out after {settings.SCRAPER_TIMEOUT}s')
    except requests.exceptions.RequestException as e:
        raise ScrapeError(str(e))


def scrape_website(url):
    """
    Scrape one website.

    Returns {url, success, data: {email, facebook, instagram}} and, on
    failure, an `error` message with empty data. Never raises.
    """
    target = normalize_url(url)
    try:
        html = fetch_page(target)
    except ScrapeError as e:
        logger.warning(f"Scrape failed for {target}: {str(e)}")
        return {
            'url': target,
            'success': False,
            'error': str(e),
            'data': {'email': '', 'facebook': '', 'instagram': ''},
        }

    data = extract_contact_details(html)
    logger.info(
        f"Scraped {target}: email={data['email'] or 'None'}, "
        f"facebook={data['facebook'] or 'None'}, instagram={data['instagram'] or 'None'}"
    )
    return {'url': target, 'success': True, 'data': data}


def scrape_many(urls, delay=None):
    """Scrape URLs one after another, pausing between requests"""
    if delay is None:
        delay = settings.SCRAPER_REQUEST_DELAY

    results = []
    for index, url in enumerate(urls):
        results.append(scrape_website(url))
        if delay and index < len(urls) - 1:
            time.sleep(delay)
    return results


def scrape_contact_details(url):
    """Contact details for a website with 'N/A' standing in for anything missing"""
    result = scrape_website(url)
    return {key: value or NOT_AVAILABLE for key, value in result['data'].items()}
