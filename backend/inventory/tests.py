"""
Test suite for inventory items, notes and rent spelling
"""
from decimal import Decimal
from django.test import TestCase, SimpleTestCase
from rest_framework import status
from backend.core.test_utils import TestDataFactory, AuthenticatedAPIClient
from .models import InventoryItem
from .utils import number_to_words


class NumberToWordsTests(SimpleTestCase):

    def test_spells_integer_part(self):
        self.assertEqual(number_to_words(0), 'Zero')
        self.assertEqual(number_to_words(15), 'Fifteen')
        self.assertEqual(number_to_words(105), 'One Hundred Five')
        self.assertEqual(number_to_words(45000), 'Forty Five Thousand')
        self.assertEqual(number_to_words(1250000), 'One Million Two Hundred Fifty Thousand')
        self.assertEqual(number_to_words(2000001), 'Two Million One')

    def test_fraction_dropped(self):
        self.assertEqual(number_to_words(Decimal('99.99')), 'Ninety Nine')
        self.assertEqual(number_to_words('310.5'), 'Three Hundred Ten')

    def test_empty_and_invalid(self):
        self.assertEqual(number_to_words(None), '')
        self.assertEqual(number_to_words(''), '')
        self.assertEqual(number_to_words('abc'), '')


class InventoryAPITests(TestCase):

    def setUp(self):
        self.manager = TestDataFactory.create_manager()
        self.client = AuthenticatedAPIClient()
        self.client.authenticate_user(self.manager)

    def test_create_with_initial_note(self):
        data = {
            'location': 'Liberty Market', 'type': 'Shop', 'floor': 'Ground', 'rent': '45000',
            'size': '', 'is_rented': False, 'notes': 'Corner unit',
        }
        response = self.client.post('/api/v1/inventory/', data, format='json')
        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.data['type'], 'Shop')
        self.assertEqual(response.data['rent_in_words'], 'Forty Five Thousand')
        self.assertIsNone(response.data['size'])
        self.assertEqual([n['text'] for n in response.data['notes']], ['Corner unit'])

        item = InventoryItem.objects.get(pk=response.data['id'])
        self.assertEqual(item.property_type, 'Shop')
        self.assertEqual(item.rent, Decimal('45000'))

    def test_create_requires_location_and_type(self):
        response = self.client.post('/api/v1/inventory/', {'rent': '100'}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn('location', response.data)
        self.assertIn('type', response.data)

    def test_filters(self):
        shop = TestDataFactory.create_inventory_item(location='Mall Road', property_type='Shop', rent=Decimal('30000'))
        TestDataFactory.create_inventory_item(property_type='Office', rent=Decimal('90000'), is_rented=True)

        response = self.client.get('/api/v1/inventory/', {'type': 'shop'})
        self.assertEqual([i['id'] for i in response.data], [shop.id])

        response = self.client.get('/api/v1/inventory/', {'is_rented': 'false'})
        self.assertEqual([i['id'] for i in response.data], [shop.id])

        response = self.client.get('/api/v1/inventory/', {'min_rent': '50000'})
        self.assertEqual([i['type'] for i in response.data], ['Office'])

        response = self.client.get('/api/v1/inventory/', {'max_rent': '50000'})
        self.assertEqual([i['id'] for i in response.data], [shop.id])

        response = self.client.get('/api/v1/inventory/', {'search': 'mall'})
        self.assertEqual([i['id'] for i in response.data], [shop.id])

    def test_update_does_not_duplicate_resubmitted_note(self):
        item = TestDataFactory.create_inventory_item()
        item.notes.create(text='Corner unit', added_by=self.manager)

        response = self.client.patch(
            f'/api/v1/inventory/{item.id}/', {'is_rented': True, 'tenant': 'Ali', 'notes': 'Corner unit'},
            format='json'
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['is_rented'])
        self.assertEqual(response.data['tenant'], 'Ali')
        self.assertEqual(len(response.data['notes']), 1)

    def test_add_and_delete_note(self):
        item = TestDataFactory.create_inventory_item()

        response = self.client.post(f'/api/v1/inventory/{item.id}/notes/', {'text': ' Owner abroad '}, format='json')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        note = response.data['notes'][0]
        self.assertEqual(note['text'], 'Owner abroad')
        self.assertEqual(note['added_by']['id'], self.manager.id)

        response = self.client.delete(f'/api/v1/inventory/{item.id}/notes/{note["id"]}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['notes'], [])

        response = self.client.delete(f'/api/v1/inventory/{item.id}/notes/{note["id"]}/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(response.data['error'], 'Note not found')

    def test_empty_note_rejected(self):
        item = TestDataFactory.create_inventory_item()
        response = self.client.post(f'/api/v1/inventory/{item.id}/notes/', {'text': ''}, format='json')
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(response.data['error'], 'Note text is required')

    def test_delete_item(self):
        item = TestDataFactory.create_inventory_item()
        response = self.client.delete(f'/api/v1/inventory/{item.id}/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['message'], 'Inventory item deleted successfully')
        self.assertFalse(InventoryItem.objects.filter(pk=item.id).exists())

    def test_requires_authentication(self):
        self.client.logout()
        response = self.client.get('/api/v1/inventory/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)
