from django.urls import path
from .views import project_list_create, project_detail, project_seed

urlpatterns = [
    path('projects/', project_list_create, name='project-list-create'),
    path('projects/seed/', project_seed, name='project-seed'),
    path('projects/<int:pk>/', project_detail, name='project-detail'),
]
