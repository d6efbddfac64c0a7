from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .audit import AgricultureAuditService
from .models import Cultivation, Person
from .serializers import (
    CultivationFilterSerializer,
    CultivationSerializer,
    CultivationWithPaymentsSerializer,
    CultivationWriteSerializer,
    PersonSerializer,
)
from .services import CultivationService, PersonService, filter_by_date_range


def _changed_fields(instance, validated_data) -> list[str]:
    return [name for name, value in validated_data.items() if getattr(instance, name) != value]


# ================= PERSONS =================

class PersonListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        persons = Person.objects.filter(created_by=request.user).order_by("name", "id")
        return Response(PersonSerializer(persons, many=True).data)

    def post(self, request):
        serializer = PersonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        person = serializer.save(created_by=request.user)
        AgricultureAuditService.log_person_created(request, person)
        return Response(PersonSerializer(person).data, status=status.HTTP_201_CREATED)


class PersonDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_person(self, request, person_id: int):
        return Person.objects.filter(id=person_id, created_by=request.user).first()

    def get(self, request, person_id: int):
        person = self._get_person(request, person_id)
        if not person:
            return Response({"detail": "Person not found."}, status=status.HTTP_404_NOT_FOUND)

        cultivations, totals = PersonService.totals(person)
        payload = PersonSerializer(person).data
        payload["cultivations"] = cultivations
        payload["totals"] = totals
        return Response(payload)

    def put(self, request, person_id: int):
        person = self._get_person(request, person_id)
        if not person:
            return Response({"detail": "Person not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = PersonSerializer(person, data=request.data, partial=request.method == "PATCH")
        serializer.is_valid(raise_exception=True)
        changed_fields = _changed_fields(person, serializer.validated_data)
        person = serializer.save()
        if changed_fields:
            AgricultureAuditService.log_person_updated(request, person, changed_fields=changed_fields)
        return Response(PersonSerializer(person).data)

    def patch(self, request, person_id: int):
        return self.put(request, person_id)

    def delete(self, request, person_id: int):
        person = self._get_person(request, person_id)
        if not person:
            return Response({"detail": "Person not found."}, status=status.HTTP_404_NOT_FOUND)

        name = person.name
        PersonService.delete(person)
        AgricultureAuditService.log_person_deleted(request, person_id=person_id, name=name)
        return Response(
            {"detail": "Person and all related data deleted successfully."},
            status=status.HTTP_200_OK,
        )


# ================= CULTIVATIONS =================

class CultivationListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = CultivationFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        qs = Cultivation.objects.select_related("person")
        if filters.get("crop_name"):
            qs = qs.filter(crop_name__icontains=filters["crop_name"])
        qs = filter_by_date_range(qs, "cultivation_date", filters.get("start_date"), filters.get("end_date"))
        if filters.get("payment_mode"):
            qs = qs.filter(payment_mode=filters["payment_mode"])

        qs = qs.order_by("-cultivation_date", "-id")
        return Response(CultivationSerializer(qs, many=True).data)

    @extend_schema(
        request=CultivationWriteSerializer,
        responses={201: OpenApiResponse(response=CultivationSerializer, description="Cultivation created")},
    )
    def post(self, request):
        serializer = CultivationWriteSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)
        cultivation = CultivationService.create(**serializer.validated_data)
        AgricultureAuditService.log_cultivation_created(request, cultivation)
        return Response(CultivationSerializer(cultivation).data, status=status.HTTP_201_CREATED)


class CultivationDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def _get_cultivation(self, cultivation_id: int):
        return Cultivation.objects.select_related("person").filter(id=cultivation_id).first()

    def get(self, request, cultivation_id: int):
        cultivation = self._get_cultivation(cultivation_id)
        if not cultivation:
            return Response({"detail": "Cultivation not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(CultivationWithPaymentsSerializer(cultivation).data)

    def put(self, request, cultivation_id: int):
        cultivation = self._get_cultivation(cultivation_id)
        if not cultivation:
            return Response({"detail": "Cultivation not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = CultivationWriteSerializer(
            cultivation,
            data=request.data,
            partial=request.method == "PATCH",
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)
        changed_fields = _changed_fields(cultivation, serializer.validated_data)
        cultivation = serializer.save()
        if changed_fields:
            AgricultureAuditService.log_cultivation_updated(request, cultivation, changed_fields=changed_fields)
        return Response(CultivationSerializer(cultivation).data)

    def patch(self, request, cultivation_id: int):
        return self.put(request, cultivation_id)

    def delete(self, request, cultivation_id: int):
        cultivation = self._get_cultivation(cultivation_id)
        if not cultivation:
            return Response({"detail": "Cultivation not found."}, status=status.HTTP_404_NOT_FOUND)

        crop_name = cultivation.crop_name
        cultivation.delete()
        AgricultureAuditService.log_cultivation_deleted(
            request,
            cultivation_id=cultivation_id,
            crop_name=crop_name,
        )
        return Response({"detail": "Cultivation deleted successfully."}, status=status.HTTP_200_OK)


class CultivationCropSummaryAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = CultivationFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        qs = filter_by_date_range(
            Cultivation.objects.all(),
            "cultivation_date",
            query.validated_data.get("start_date"),
            query.validated_data.get("end_date"),
        )
        return Response(CultivationService.crop_summary(qs))
