import logging

from django.contrib.auth import authenticate
from django.db import IntegrityError
from django.db import transaction
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from eventhub.users.errors import EmailAlreadyRegisteredError
from eventhub.users.errors import InvalidCredentialsError
from eventhub.users.models import User
from eventhub.users.tokens import issue_access_token

from .serializers import AuthResponseSerializer
from .serializers import LoginSerializer
from .serializers import MeSerializer
from .serializers import RegisterSerializer
from .serializers import UserSerializer
from .throttling import LoginRateThrottle
from .throttling import LoginThrottled

logger = logging.getLogger(__name__)


def _auth_payload(user: User) -> dict:
    return {"token": issue_access_token(user), "user": UserSerializer(user).data}


class RegisterView(APIView):
    """Create an account and hand back a token for it."""

    permission_classes = [AllowAny]
    authentication_classes: list = []

    @extend_schema(
        tags=["Authentication"],
        request=RegisterSerializer,
        responses={201: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        if User.objects.filter(email=data["email"]).exists():
            raise EmailAlreadyRegisteredError
        try:
            with transaction.atomic():
                user = User.objects.create_user(
                    email=data["email"],
                    password=data["password"],
                    name=data["name"],
                )
        except IntegrityError as exc:
            # Lost a race against a concurrent registration of the same email.
            raise EmailAlreadyRegisteredError from exc

        logger.info("Registered user %s", user.pk)
        return Response(_auth_payload(user), status=status.HTTP_201_CREATED)


class LoginView(APIView):
    """Exchange email and password for a token."""

    permission_classes = [AllowAny]
    authentication_classes: list = []
    throttle_classes = [LoginRateThrottle]

    def throttled(self, request, wait):
        raise LoginThrottled(wait)

    @extend_schema(
        tags=["Authentication"],
        request=LoginSerializer,
        responses={200: AuthResponseSerializer},
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = authenticate(
            request,
            email=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )
        if user is None:
            raise InvalidCredentialsError
        return Response(_auth_payload(user))


class MeView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Authentication"], responses={200: MeSerializer})
    def get(self, request):
        serializer = MeSerializer(request.user, context={"request": request})
        return Response(serializer.data)
