from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .audit import PropertiesAuditService
from .models import Property
from .serializers import PropertyFilterSerializer, PropertySerializer
from .services import PropertyService


def _filtered_properties(query_params):
    query = PropertyFilterSerializer(data=query_params)
    query.is_valid(raise_exception=True)
    filters = query.validated_data

    qs = Property.objects.all()
    if filters.get("property_type"):
        qs = qs.filter(property_type=filters["property_type"])
    if filters.get("partner_name"):
        qs = qs.filter(partner_name__icontains=filters["partner_name"])
    if filters.get("start_date") and filters.get("end_date"):
        qs = qs.filter(transaction_date__range=(filters["start_date"], filters["end_date"]))
    return qs.order_by("-transaction_date", "-id")


class PropertyListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(PropertySerializer(_filtered_properties(request.query_params), many=True).data)

    def post(self, request):
        serializer = PropertySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        prop = PropertyService.create(**serializer.validated_data)
        PropertiesAuditService.log_property_created(request, prop)
        return Response(PropertySerializer(prop).data, status=status.HTTP_201_CREATED)


class PropertyDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, property_id: int):
        prop = Property.objects.filter(id=property_id).first()
        if not prop:
            return Response({"detail": "Property not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(PropertySerializer(prop).data)

    def put(self, request, property_id: int):
        prop = Property.objects.filter(id=property_id).first()
        if not prop:
            return Response({"detail": "Property not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = PropertySerializer(prop, data=request.data, partial=request.method == "PATCH")
        serializer.is_valid(raise_exception=True)
        changed_fields = [
            name for name, value in serializer.validated_data.items()
            if getattr(prop, name) != value
        ]
        prop = serializer.save()
        if changed_fields:
            PropertiesAuditService.log_property_updated(request, prop, changed_fields=changed_fields)
        return Response(PropertySerializer(prop).data)

    def patch(self, request, property_id: int):
        return self.put(request, property_id)

    def delete(self, request, property_id: int):
        prop = Property.objects.filter(id=property_id).first()
        if not prop:
            return Response({"detail": "Property not found."}, status=status.HTTP_404_NOT_FOUND)

        prop.delete()
        PropertiesAuditService.log_property_deleted(request, property_id=property_id)
        return Response({"detail": "Property deleted successfully."}, status=status.HTTP_200_OK)


class PropertyOverviewAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(PropertyService.overview(_filtered_properties(request.query_params)))
