# customers/api.py
import logging

from django.db import DatabaseError
from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response

from customers.models import Customer
from customers.serializers import CustomerSerializer

logger = logging.getLogger(__name__)


@api_view(["GET", "POST"])
def customer_list(request):
    """List customers by name, or create one from the intake form."""
    if request.method == "GET":
        customers = Customer.objects.order_by("name")
        return Response(CustomerSerializer(customers, many=True).data)

    serializer = CustomerSerializer(data=request.data)
    if not serializer.is_valid():
        logger.warning(f"Rejected customer payload: {serializer.errors}")
        return Response(
            {"error": "name and a unique, valid email are required.", "details": serializer.errors},
            status=status.HTTP_400_BAD_REQUEST,
        )

    try:
        customer = serializer.save()
    except DatabaseError:
        logger.exception("Failed to create customer")
        return Response({"error": "Failed to create customer."}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

    logger.info(f"Created customer id={customer.id} ({customer.email})")
    return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)
