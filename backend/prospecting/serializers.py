from rest_framework import serializers


class PlacesSearchSerializer(serializers.Serializer):
    city = serializers.CharField(max_length=100)
    area = serializers.CharField(max_length=100)
    industry = serializers.CharField(max_length=100)


class ScrapeSerializer(serializers.Serializer):
    url = serializers.CharField(max_length=2000)


class ScrapeBatchSerializer(serializers.Serializer):
    urls = serializers.ListField(
        child=serializers.CharField(max_length=2000),
        allow_empty=False,
        max_length=100,
    )
