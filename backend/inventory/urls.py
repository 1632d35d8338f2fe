from django.urls import path
from .views import (
    inventory_list_create, inventory_detail,
    inventory_add_note, inventory_delete_note,
)

urlpatterns = [
    path('inventory/', inventory_list_create, name='inventory-list-create'),
    path('inventory/<int:pk>/', inventory_detail, name='inventory-detail'),
    path('inventory/<int:pk>/notes/', inventory_add_note, name='inventory-add-note'),
    path('inventory/<int:pk>/notes/<int:note_id>/', inventory_delete_note, name='inventory-delete-note'),
]
