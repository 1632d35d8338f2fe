"""
Test suite for prospecting: website scraping and Google Places search
"""
import socket
from unittest import mock

import requests
from django.test import TestCase, SimpleTestCase, override_settings
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .google_places import GooglePlacesClient, GooglePlacesError, search_places_with_contacts
from .scraper import extract_contact_details, normalize_url, scrape_website, scrape_contact_details

SALON_PAGE = """
<html>
<head><meta name="contact:email" content="Info@Glow.pk"></head>
<body>
  <a href="https://www.facebook.com/sharer/sharer.php?u=https://glow.pk">Share</a>
  <a href="https://facebook.com/GlowStudioPK">Facebook</a>
  <a href="https://instagram.com/p/abc123">Latest post</a>
  <a href="https://www.instagram.com/glow.studio/">Instagram</a>
  <img src="/static/icon@2x.png">
</body>
</html>
"""


def page_response(html):
    response = mock.Mock(text=html, is_redirect=False)
    response.raise_for_status.return_value = None
    return response


def places_response(payload, ok=True, status_code=200, reason='OK'):
    response = mock.Mock(ok=ok, status_code=status_code, reason=reason, text='')
    response.json.return_value = payload
    return response


def redirect_response(location):
    return mock.Mock(is_redirect=True, headers={'Location': location})


def resolve_to(*addresses):
    return [(2, 1, 6, '', (address, 0)) for address in addresses]


class PublicHostMixin:
    """Resolves every hostname to a public address so no test touches DNS"""

    def setUp(self):
        super().setUp()
        patcher = mock.patch('backend.prospecting.scraper.socket.getaddrinfo', return_value=resolve_to('93.184.216.34'))
        self.mock_resolve = patcher.start()
        self.addCleanup(patcher.stop)


class ExtractContactDetailsTests(SimpleTestCase):

    def test_structured_sources(self):
        details = extract_contact_details(SALON_PAGE)
        self.assertEqual(details, {
            'email': 'info@glow.pk',
            'facebook': 'https://www.facebook.com/GlowStudioPK',
            'instagram': 'https://www.instagram.com/glow.studio',
        })

    def test_mailto_wins_and_query_is_dropped(self):
        html = '<p>write to other@shop.pk</p><a href="mailto:Sales@Shop.PK?subject=Hi">Mail</a>'
        self.assertEqual(extract_contact_details(html)['email'], 'sales@shop.pk')

    def test_placeholders_and_images_skipped(self):
        html = '<img src="logo@2x.png"><p>Contact you@example.com or real@shop.pk</p>'
        self.assertEqual(extract_contact_details(html)['email'], 'real@shop.pk')

    def test_obfuscated_email(self):
        html = '<p>Email: hello [at] shop [dot] pk</p>'
        self.assertEqual(extract_contact_details(html)['email'], 'hello@shop.pk')

    def test_facebook_profile_id(self):
        html = '<a href="https://m.facebook.com/profile.php?id=1000123">FB</a>'
        self.assertEqual(extract_contact_details(html)['facebook'],
                         'https://www.facebook.com/profile.php?id=1000123')

    def test_nothing_found(self):
        self.assertEqual(extract_contact_details('<p>Call us</p>'), {'email': '', 'facebook': '', 'instagram': ''})
        self.assertEqual(extract_contact_details(None)['email'], '')

    def test_normalize_url(self):
        self.assertEqual(normalize_url(' glow.pk '), 'https://glow.pk')
        self.assertEqual(normalize_url('http://glow.pk'), 'http://glow.pk')


@override_settings(SCRAPER_TIMEOUT=5, SCRAPER_REQUEST_DELAY=0)
class ScrapeWebsiteTests(PublicHostMixin, SimpleTestCase):

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_success(self, mock_get):
        mock_get.return_value = page_response(SALON_PAGE)
        result = scrape_website('glow.pk')
        self.assertTrue(result['success'])
        self.assertEqual(result['url'], 'https://glow.pk')
        self.assertEqual(result['data']['email'], 'info@glow.pk')
        self.assertEqual(mock_get.call_args.kwargs['timeout'], 5)

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout()
        result = scrape_website('https://slow.pk')
        self.assertFalse(result['success'])
        self.assertEqual(result['error'], 'Timed out after 5s')
        self.assertEqual(result['data'], {'email': '', 'facebook': '', 'instagram': ''})

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_missing_values_become_not_available(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError('refused')
        self.assertEqual(scrape_contact_details('down.pk'),
                         {'email': 'N/A', 'facebook': 'N/A', 'instagram': 'N/A'})

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_loopback_host_refused(self, mock_get):
        self.mock_resolve.return_value = resolve_to('127.0.0.1')
        result = scrape_website('http://localhost:8000/admin/')
        self.assertFalse(result['success'])
        self.assertEqual(result['error'], 'Refusing to fetch non-public address for localhost')
        mock_get.assert_not_called()

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_link_local_and_private_hosts_refused(self, mock_get):
        for address in ('169.254.169.254', '10.0.0.5', '::1'):
            self.mock_resolve.return_value = resolve_to(address)
            self.assertFalse(scrape_website('internal.example')['success'])
        mock_get.assert_not_called()

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_redirect_to_private_host_refused(self, mock_get):
        self.mock_resolve.side_effect = [resolve_to('93.184.216.34'), resolve_to('192.168.1.1')]
        mock_get.return_value = redirect_response('http://router.lan/')
        result = scrape_website('glow.pk')
        self.assertFalse(result['success'])
        self.assertEqual(mock_get.call_count, 1)
        self.assertFalse(mock_get.call_args.kwargs['allow_redirects'])

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_follows_public_redirect(self, mock_get):
        mock_get.side_effect = [redirect_response('/contact'), page_response(SALON_PAGE)]
        result = scrape_website('glow.pk')
        self.assertTrue(result['success'])
        self.assertEqual(mock_get.call_args_list[1].args[0], 'https://glow.pk/contact')

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_unresolvable_host(self, mock_get):
        self.mock_resolve.side_effect = socket.gaierror('Name or service not known')
        result = scrape_website('nowhere.invalid')
        self.assertFalse(result['success'])
        self.assertIn('Could not resolve nowhere.invalid', result['error'])
        mock_get.assert_not_called()


@override_settings(GOOGLE_PLACES_API_KEY='test-key', GOOGLE_PLACES_COUNTRY='Pakistan', SCRAPER_REQUEST_DELAY=0)
class GooglePlacesClientTests(SimpleTestCase):

    def setUp(self):
        self.places = GooglePlacesClient(page_delay=0)

    def test_build_query(self):
        self.assertEqual(self.places.build_query('Lahore', 'Gulberg', 'Salons'), 'Salons in Gulberg, Lahore, Pakistan')

    def test_session_headers(self):
        self.assertEqual(self.places.session.headers['X-Goog-Api-Key'], 'test-key')
        self.assertIn('places.websiteUri', self.places.session.headers['X-Goog-FieldMask'])

    @mock.patch.object(requests.Session, 'post')
    def test_pages_until_token_runs_out(self, mock_post):
        mock_post.side_effect = [
            places_response({
                'places': [
                    {'id': 'a', 'displayName': {'text': 'Glow'}, 'websiteUri': 'https://glow.pk', 'rating': 4.5},
                    {'id': 'b', 'displayName': {'text': 'Trim'}, 'internationalPhoneNumber': '+92 42 111'},
                ],
                'nextPageToken': 'next',
            }),
            places_response({'places': [{'id': 'c', 'formattedAddress': 'MM Alam Road'}]}),
        ]
        places = self.places.text_search('Salons in Gulberg, Lahore, Pakistan')

        self.assertEqual([p['place_id'] for p in places], ['a', 'b', 'c'])
        self.assertEqual(places[1]['phone'], '+92 42 111')
        self.assertEqual(places[1]['website'], 'N/A')
        self.assertEqual(places[2]['name'], 'N/A')
        self.assertEqual(mock_post.call_count, 2)
        self.assertEqual(mock_post.call_args_list[1].kwargs['json']['pageToken'], 'next')

    @mock.patch.object(requests.Session, 'post')
    def test_stops_after_three_pages(self, mock_post):
        page = {'places': [{'id': 'x'}], 'nextPageToken': 'more'}
        mock_post.side_effect = [places_response(page) for _ in range(5)]
        self.assertEqual(len(self.places.text_search('q')), 3)
        self.assertEqual(mock_post.call_count, 3)

    @mock.patch.object(requests.Session, 'post')
    def test_http_error(self, mock_post):
        mock_post.return_value = places_response({}, ok=False, status_code=403, reason='Forbidden')
        with self.assertRaises(GooglePlacesError) as ctx:
            self.places.text_search('q')
        self.assertEqual(ctx.exception.message, 'Google Places API error: 403 Forbidden')
        self.assertEqual(ctx.exception.status_code, 403)

    @mock.patch.object(requests.Session, 'post')
    def test_error_in_body(self, mock_post):
        mock_post.return_value = places_response({'error': {'code': 400, 'message': 'Bad query'}})
        with self.assertRaisesMessage(GooglePlacesError, 'Google Places API error: 400 - Bad query'):
            self.places.text_search('q')

    @mock.patch.object(requests.Session, 'post')
    def test_non_json_body(self, mock_post):
        response = places_response(None, status_code=200)
        response.json.side_effect = ValueError('Expecting value')
        mock_post.return_value = response
        with self.assertRaisesMessage(GooglePlacesError, 'Google Places API returned an invalid response'):
            self.places.text_search('q')

    @mock.patch('backend.prospecting.google_places.scrape_contact_details')
    def test_search_with_contacts(self, mock_scrape):
        mock_scrape.return_value = {'email': 'info@glow.pk', 'facebook': 'N/A', 'instagram': 'N/A'}
        self.places.text_search = mock.Mock(return_value=[
            GooglePlacesClient.normalize_place({'id': 'a', 'websiteUri': 'https://glow.pk'}),
            GooglePlacesClient.normalize_place({'id': 'b'}),
        ])

        places = search_places_with_contacts('Lahore', 'Gulberg', 'Salons', client=self.places)
        self.places.text_search.assert_called_once_with('Salons in Gulberg, Lahore, Pakistan')
        mock_scrape.assert_called_once_with('https://glow.pk')
        self.assertEqual(places[0]['email'], 'info@glow.pk')
        self.assertEqual(places[1]['email'], 'N/A')
        self.assertEqual(places[1]['instagram'], 'N/A')


class ProspectingAPITests(PublicHostMixin, TestCase):

    def setUp(self):
        super().setUp()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(TestDataFactory.create_manager())

    @override_settings(GOOGLE_PLACES_API_KEY='')
    def test_search_without_api_key(self):
        data = {'city': 'Lahore', 'area': 'Gulberg', 'industry': 'Salons'}
        response = self.client.post('/api/v1/google-places/search/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        self.assertIn('Google Places API key is not configured', response.data['error'])

    def test_search_requires_fields(self):
        response = self.client.post('/api/v1/google-places/search/', {'city': 'Lahore'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('industry', response.data)

    @override_settings(GOOGLE_PLACES_API_KEY='test-key')
    @mock.patch('backend.prospecting.views.search_places_with_contacts')
    def test_search_upstream_failure(self, mock_search):
        mock_search.side_effect = GooglePlacesError('Google Places API error: 403 Forbidden', status_code=403)
        data = {'city': 'Lahore', 'area': 'Gulberg', 'industry': 'Salons'}
        response = self.client.post('/api/v1/google-places/search/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'Google Places API error: 403 Forbidden')

    @override_settings(GOOGLE_PLACES_API_KEY='test-key', GOOGLE_PLACES_PAGE_DELAY=0)
    @mock.patch.object(requests.Session, 'post')
    def test_search_non_json_upstream(self, mock_post):
        upstream = places_response(None)
        upstream.json.side_effect = ValueError('Expecting value')
        mock_post.return_value = upstream
        data = {'city': 'Lahore', 'area': 'Gulberg', 'industry': 'Salons'}
        response = self.client.post('/api/v1/google-places/search/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertEqual(response.data['error'], 'Google Places API returned an invalid response')

    @override_settings(GOOGLE_PLACES_API_KEY='test-key')
    @mock.patch('backend.prospecting.views.search_places_with_contacts')
    def test_search_success(self, mock_search):
        mock_search.return_value = [{'name': 'Glow', 'email': 'N/A'}]
        data = {'city': 'Lahore', 'area': 'Gulberg', 'industry': 'Salons'}
        response = self.client.post('/api/v1/google-places/search/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data, [{'name': 'Glow', 'email': 'N/A'}])
        mock_search.assert_called_once_with('Lahore', 'Gulberg', 'Salons')

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_scrape_single(self, mock_get):
        mock_get.return_value = page_response(SALON_PAGE)
        response = self.client.post('/api/v1/scraper/scrape/', {'url': 'glow.pk'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['data']['instagram'], 'https://www.instagram.com/glow.studio')

    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_scrape_single_failure(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError('refused')
        response = self.client.post('/api/v1/scraper/scrape/', {'url': 'down.pk'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_502_BAD_GATEWAY)
        self.assertFalse(response.data['success'])

    @override_settings(SCRAPER_REQUEST_DELAY=0)
    @mock.patch('backend.prospecting.scraper.requests.get')
    def test_scrape_batch(self, mock_get):
        mock_get.side_effect = [page_response(SALON_PAGE), requests.exceptions.ConnectionError('refused')]
        response = self.client.post(
            '/api/v1/scraper/scrape-batch/', {'urls': ['glow.pk', 'down.pk']}, format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['total'], 2)
        self.assertEqual(response.data['successful'], 1)
        self.assertEqual(response.data['failed'], 1)

    def test_scrape_batch_requires_urls(self):
        response = self.client.post('/api/v1/scraper/scrape-batch/', {'urls': []}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
