from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from .models import Customer


class LowercaseEmailField(serializers.EmailField):
    def to_internal_value(self, data):
        return super().to_internal_value(data).strip().lower()


class CustomerSerializer(serializers.ModelSerializer):
    # lowercased before the unique check runs
    email = LowercaseEmailField(
        max_length=254,
        validators=[
            UniqueValidator(
                queryset=Customer.objects.all(),
                lookup="iexact",
                message="A customer with this email already exists.",
            )
        ],
    )

    class Meta:
        model = Customer
        fields = [
            "id",
            "name",
            "email",
            "segment",
            "agent_type",
            "subscription_start_date",
            "source_campaign",
        ]

    def validate_name(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Customer name cannot be blank.")
        return value
