import logging
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated
from django.conf import settings
from .google_places import GooglePlacesError, search_places_with_contacts
from .scraper import scrape_website, scrape_many
from .serializers import PlacesSearchSerializer, ScrapeSerializer, ScrapeBatchSerializer

logger = logging.getLogger('backend.prospecting')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def search_places(request):
    """Find businesses via Google Places and scrape their websites for contacts"""
    serializer = PlacesSearchSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if not settings.GOOGLE_PLACES_API_KEY:
        logger.error("GOOGLE_PLACES_API_KEY is not configured")
        return Response(
            {'error': 'Google Places API key is not configured on the server. '
                      'Set GOOGLE_PLACES_API_KEY in the environment and restart the backend.'},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    data = serializer.validated_data
    try:
        places = search_places_with_contacts(data['city'], data['area'], data['industry'])
    except GooglePlacesError as e:
        logger.error(f"Places search failed for {request.user.email}: {e.message}")
        return Response({'error': e.message}, status=status.HTTP_502_BAD_GATEWAY)

    logger.info(f"Places search by {request.user.email} returned {len(places)} results")
    return Response(places)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def scrape_single(request):
    """Scrape one website for email and social profile links"""
    serializer = ScrapeSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    result = scrape_website(serializer.validated_data['url'])
    if not result['success']:
        return Response(result, status=status.HTTP_502_BAD_GATEWAY)
    return Response(result)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def scrape_batch(request):
    """Scrape several websites sequentially"""
    serializer = ScrapeBatchSerializer(data=request.data)
    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    results = scrape_many(serializer.validated_data['urls'])
    successful = sum(1 for result in results if result['success'])
    logger.info(f"Batch scrape by {request.user.email}: {successful}/{len(results)} succeeded")
    return Response({
        'total': len(results),
        'successful': successful,
        'failed': len(results) - successful,
        'results': results,
    })
