from rest_framework import serializers


class ImageUploadSerializer(serializers.Serializer):
    file = serializers.ImageField(
        error_messages={
            "required": "No file uploaded",
            "empty": "No file uploaded",
        },
    )


class ImageUploadResponseSerializer(serializers.Serializer):
    url = serializers.CharField()
