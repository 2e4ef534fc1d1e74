import re

from rest_framework import serializers

from eventhub.users.models import User

PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain at least one uppercase letter"),
    (re.compile(r"[0-9]"), "Password must contain at least one number"),
    (
        re.compile(r"[^A-Za-z0-9]"),
        "Password must contain at least one special character",
    ),
)


class UserSerializer(serializers.ModelSerializer[User]):
    class Meta:
        model = User
        fields = ["id", "email", "name"]
        read_only_fields = fields


class RegisterSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={"invalid": "Invalid email format"})
    password = serializers.CharField(
        write_only=True,
        trim_whitespace=False,
        min_length=8,
        error_messages={"min_length": "Password must be at least 8 characters"},
    )
    name = serializers.CharField(
        min_length=2,
        max_length=50,
        error_messages={
            "min_length": "Name must be at least 2 characters",
            "max_length": "Name too long",
        },
    )

    def validate_password(self, value: str) -> str:
        # Report every rule the password breaks, not only the first one.
        problems = [message for rule, message in PASSWORD_RULES if not rule.search(value)]
        if problems:
            raise serializers.ValidationError(problems)
        return value


class LoginSerializer(serializers.Serializer):
    email = serializers.EmailField(error_messages={"invalid": "Invalid email format"})
    password = serializers.CharField(
        trim_whitespace=False,
        error_messages={"blank": "Password is required"},
    )


class AuthResponseSerializer(serializers.Serializer):
    token = serializers.CharField()
    user = UserSerializer()


class MeSerializer(UserSerializer):
    token = serializers.SerializerMethodField()

    class Meta(UserSerializer.Meta):
        fields = [*UserSerializer.Meta.fields, "token"]
        read_only_fields = fields

    def get_token(self, obj: User) -> str:
        request = self.context.get("request")
        auth = getattr(request, "auth", None)
        if auth is None:
            return ""
        # Echo the token exactly as the client sent it.
        raw = getattr(auth, "token", None)
        if isinstance(raw, bytes):
            return raw.decode()
        return raw or str(auth)
