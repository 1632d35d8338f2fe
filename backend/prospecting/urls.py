from django.urls import path
from .views import search_places, scrape_single, scrape_batch

urlpatterns = [
    path('google-places/search/', search_places, name='google-places-search'),
    path('scraper/scrape/', scrape_single, name='scraper-scrape'),
    path('scraper/scrape-batch/', scrape_batch, name='scraper-scrape-batch'),
]
