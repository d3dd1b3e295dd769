# ==================== PAYMENTS/SERIALIZERS.PY ====================
from rest_framework import serializers
from .models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    booking_id = serializers.IntegerField(source='booking.id', read_only=True)
    user_name = serializers.CharField(source='user.name', read_only=True)
    spot_number = serializers.CharField(source='booking.parking_spot.spot_number', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'booking_id', 'user_name', 'spot_number', 'amount', 'payment_method',
            'status', 'transaction_id', 'payment_details', 'created_at', 'updated_at'
        ]
        read_only_fields = ['id', 'amount', 'payment_method', 'status', 'transaction_id',
                            'payment_details', 'created_at', 'updated_at']


class KhaltiVerifySerializer(serializers.Serializer):
    token = serializers.CharField()
    amount = serializers.IntegerField(min_value=1, help_text="Amount in paisa")
    booking_id = serializers.IntegerField(min_value=1)


class PaymentHistoryQuerySerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Payment.STATUS_CHOICES, required=False)
    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, data):
        start_date, end_date = data.get('start_date'), data.get('end_date')
        if start_date and end_date and start_date > end_date:
            raise serializers.ValidationError({'end_date': 'End date must not be before start date'})
        return data


class AnalyticsQuerySerializer(PaymentHistoryQuerySerializer):
    status = None


class ReceiptSerializer(serializers.Serializer):
    """Printable projection of a payment and its booking"""
    receipt_number = serializers.CharField()
    payment_id = serializers.IntegerField(source='id')
    transaction_id = serializers.CharField()
    date = serializers.DateTimeField(source='created_at')
    customer_name = serializers.CharField(source='user.name')
    customer_email = serializers.EmailField(source='user.email')
    payment_method = serializers.CharField()
    status = serializers.CharField()
    booking_details = serializers.SerializerMethodField()
    amount = serializers.DecimalField(max_digits=10, decimal_places=2)
    currency = serializers.SerializerMethodField()

    def get_booking_details(self, obj):
        booking = obj.booking
        spot = booking.parking_spot
        return {
            'booking_id': booking.pk,
            'spot_number': spot.spot_number,
            'location': spot.location,
            'start_time': serializers.DateTimeField().to_representation(booking.start_time),
            'end_time': serializers.DateTimeField().to_representation(booking.end_time),
            'duration': booking.duration,
            'hourly_rate': str(spot.hourly_rate),
        }

    def get_currency(self, obj):
        return 'NPR'
