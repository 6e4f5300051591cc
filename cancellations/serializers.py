from rest_framework import serializers

OPTIONAL_TEXT_FIELDS = (
    "secondary_notes",
    "closer_name",
    "saved_by",
    "save_reason",
    "save_notes",
    "ticket_url",
    "agent_plan",
)


class CancellationPatchSerializer(serializers.Serializer):
    """Editable cancellation fields; also the base for intake validation."""

    cancellation_date = serializers.DateField()
    primary_reason = serializers.CharField(max_length=255)
    secondary_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    usage_downloads = serializers.IntegerField(min_value=0, default=0)
    usage_posts = serializers.IntegerField(min_value=0, default=0)
    usage_logins = serializers.IntegerField(min_value=0, default=0)
    usage_minutes = serializers.IntegerField(min_value=0, default=0)

    closer_name = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    saved_flag = serializers.BooleanField(default=False)
    saved_by = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    save_reason = serializers.CharField(max_length=255, required=False, allow_blank=True, allow_null=True)
    save_notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)

    ticket_url = serializers.URLField(max_length=500, required=False, allow_blank=True, allow_null=True)
    churn_amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    saved_revenue = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0, required=False, allow_null=True)
    agent_plan = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    funds_disputed = serializers.BooleanField(default=False)

    def validate(self, attrs):
        for name in OPTIONAL_TEXT_FIELDS:
            if name in attrs and attrs[name] is not None:
                attrs[name] = attrs[name].strip() or None
        return attrs


class CancellationIntakeSerializer(CancellationPatchSerializer):
    customer_id = serializers.IntegerField(min_value=1)
