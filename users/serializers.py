# ==================== USERS/SERIALIZERS.PY ====================
from rest_framework import serializers
from rest_framework.validators import UniqueValidator
from django.contrib.auth import authenticate
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from phonenumber_field.serializerfields import PhoneNumberField

from .models import CustomUser


class UserRegistrationSerializer(serializers.ModelSerializer):
    email = serializers.EmailField(
        validators=[UniqueValidator(
            queryset=CustomUser.objects.all(),
            message='User already exists',
            lookup='iexact',
        )]
    )
    password = serializers.CharField(write_only=True, min_length=8)
    phone = PhoneNumberField(required=False, allow_blank=True)

    class Meta:
        model = CustomUser
        fields = ['name', 'email', 'phone', 'password']

    def validate_name(self, value):
        value = value.strip()
        if len(value) < 2:
            raise serializers.ValidationError('Name must be between 2 and 50 characters')
        return value

    def validate(self, data):
        candidate = CustomUser(name=data.get('name', ''), email=data.get('email', ''))
        try:
            validate_password(data['password'], user=candidate)
        except DjangoValidationError as exc:
            raise serializers.ValidationError({'password': list(exc.messages)})
        return data

    def create(self, validated_data):
        password = validated_data.pop('password')
        return CustomUser.objects.create_user(password=password, **validated_data)


class UserLoginSerializer(serializers.Serializer):
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        user = authenticate(
            request=self.context.get('request'),
            email=data['email'].lower(),
            password=data['password'],
        )
        if not user:
            raise serializers.ValidationError("Invalid credentials")
        data['user'] = user
        return data


class UserProfileSerializer(serializers.ModelSerializer):
    phone = PhoneNumberField(required=False, allow_blank=True)

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email', 'role', 'phone', 'created_at', 'updated_at']
        read_only_fields = ['id', 'email', 'role', 'created_at', 'updated_at']


class UserSummarySerializer(serializers.ModelSerializer):
    """Embedded owner info on bookings and payments"""

    class Meta:
        model = CustomUser
        fields = ['id', 'name', 'email']
