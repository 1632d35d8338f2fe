"""
Google Places API (new) text-search client.

Docs: https://developers.google.com/maps/documentation/places/web-service/text-search

The API returns at most 20 places per page and 3 pages per query. A page
token only becomes valid a moment after it is issued, so the client waits
between pages.
"""
import logging
import time
from typing import Optional, Dict, Any, List

import requests
from django.conf import settings

from .scraper import NOT_AVAILABLE, scrape_contact_details

logger = logging.getLogger('backend.prospecting')


class GooglePlacesError(Exception):
    """Raised when the Places API cannot be reached or answers with an error"""
    def __init__(self, message: str, status_code: int = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class GooglePlacesClient:
    RESULTS_PER_PAGE = 20
    MAX_PAGES = 3
    MAX_RESULTS = RESULTS_PER_PAGE * MAX_PAGES
    FIELD_MASK = ','.join([
        'places.id',
        'places.displayName',
        'places.formattedAddress',
        'places.rating',
        'places.nationalPhoneNumber',
        'places.internationalPhoneNumber',
        'places.websiteUri',
        'nextPageToken',
    ])

    def __init__(self, api_key: str = None, search_url: str = None, page_delay: float = None, timeout: int = None):
        self.api_key = api_key if api_key is not None else settings.GOOGLE_PLACES_API_KEY
        self.search_url = search_url or settings.GOOGLE_PLACES_SEARCH_URL
        self.page_delay = settings.GOOGLE_PLACES_PAGE_DELAY if page_delay is None else page_delay
        self.timeout = timeout or settings.SCRAPER_TIMEOUT * 3

        self.session = requests.Session()
        self.session.headers.update({
            'Content-Type': 'application/json',
            'X-Goog-Api-Key': self.api_key,
            'X-Goog-FieldMask': self.FIELD_MASK,
        })

    @staticmethod
    def build_query(city: str, area: str, industry: str, country: str = None) -> str:
        country = country or settings.GOOGLE_PLACES_COUNTRY
        return f"{industry} in {area}, {city}, {country}"

    def _request_page(self, query: str, page_token: Optional[str] = None) -> Dict[str, Any]:
        body = {'textQuery': query, 'maxResultCount': self.RESULTS_PER_PAGE}
        if page_token:
            body['pageToken'] = page_token

        try:
            response = self.session.post(self.search_url, json=body, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise GooglePlacesError(f"Google Places API request failed: {str(e)}")

        if not response.ok:
            logger.error(f"Google Places API error response ({response.status_code}): {response.text[:500]}")
            raise GooglePlacesError(
                f"Google Places API error: {response.status_code} {response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            raise GooglePlacesError("Google Places API returned an invalid response", status_code=response.status_code)

        if data.get('error'):
            error = data['error']
            raise GooglePlacesError(
                f"Google Places API error: {error.get('code', 'UNKNOWN')} - {error.get('message', 'Unknown error')}"
            )
        return data

    @staticmethod
    def normalize_place(place: Dict[str, Any]) -> Dict[str, Any]:
        return {
            'name': (place.get('displayName') or {}).get('text') or NOT_AVAILABLE,
            'address': place.get('formattedAddress') or NOT_AVAILABLE,
            'rating': place.get('rating'),
            'phone': place.get('nationalPhoneNumber') or place.get('internationalPhoneNumber') or NOT_AVAILABLE,
            'email': NOT_AVAILABLE,
            'website': place.get('websiteUri') or NOT_AVAILABLE,
            'place_id': place.get('id'),
        }

    def text_search(self, query: str) -> List[Dict[str, Any]]:
        """All places for a query across up to MAX_PAGES pages"""
        places = []
        page_token = None

        for page in range(1, self.MAX_PAGES + 1):
            data = self._request_page(query, page_token)
            page_places = data.get('places') or []
            if not page_places:
                break

            places.extend(self.normalize_place(place) for place in page_places)
            page_token = data.get('nextPageToken')
            logger.info(f"Places page {page} for '{query}': {len(page_places)} results, {len(places)} total")

            if len(places) >= self.MAX_RESULTS or not page_token or page == self.MAX_PAGES:
                break
            if self.page_delay:
                time.sleep(self.page_delay)

        return places[:self.MAX_RESULTS]


def search_places_with_contacts(city: str, area: str, industry: str, client: GooglePlacesClient = None,
                                delay: float = None) -> List[Dict[str, Any]]:
    """
    Search places and enrich each one with scraped email and social links.

    Places without a website, or whose website cannot be scraped, carry
    'N/A' for the scraped fields.
    """
    client = client or GooglePlacesClient()
    if delay is None:
        delay = settings.SCRAPER_REQUEST_DELAY

    query = client.build_query(city, area, industry)
    places = client.text_search(query)
    logger.info(f"Found {len(places)} places for '{query}', scraping websites")

    enriched = []
    for index, place in enumerate(places):
        if place['website'] == NOT_AVAILABLE:
            enriched.append({**place, 'email': NOT_AVAILABLE, 'instagram': NOT_AVAILABLE, 'facebook': NOT_AVAILABLE})
            continue

        enriched.append({**place, **scrape_contact_details(place['website'])})
        if delay and index < len(places) - 1:
            time.sleep(delay)
    return enriched
