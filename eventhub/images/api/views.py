from drf_spectacular.utils import extend_schema
from rest_framework.parsers import FormParser
from rest_framework.parsers import MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from eventhub.images.storage import store_image

from .serializers import ImageUploadResponseSerializer
from .serializers import ImageUploadSerializer


class ImageUploadView(APIView):
    """Store an event image and return the URL to put in coverUrl or imagesUrl."""

    permission_classes = [IsAuthenticated]
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(
        tags=["Images"],
        request={"multipart/form-data": ImageUploadSerializer},
        responses=ImageUploadResponseSerializer,
    )
    def post(self, request):
        serializer = ImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        url = store_image(serializer.validated_data["file"])
        return Response({"url": request.build_absolute_uri(url)})
