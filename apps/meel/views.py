from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .audit import MeelAuditService
from .serializers import MeelFilterSerializer, MeelSerializer, MeelStatsQuerySerializer
from .services import MeelService


class MeelListCreateAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = MeelFilterSerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        filters = query.validated_data

        qs = MeelService.owned_by(request.user)
        if filters.get("transaction_type"):
            qs = qs.filter(transaction_type=filters["transaction_type"])
        if filters.get("transaction_mode"):
            qs = qs.filter(transaction_mode=filters["transaction_mode"])
        if filters.get("tag"):
            qs = qs.filter(tag__icontains=filters["tag"])
        if filters.get("crop_name"):
            qs = qs.filter(crop_name__icontains=filters["crop_name"])

        records, pagination = MeelService.paginate(
            qs.order_by("-created_at", "-id"),
            page=filters["page"],
            limit=filters["limit"],
        )
        return Response(
            {
                "meel_records": MeelSerializer(records, many=True).data,
                "pagination": pagination,
            }
        )

    @extend_schema(request=MeelSerializer, responses={201: OpenApiResponse(description="Meel record created")})
    def post(self, request):
        serializer = MeelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        meel = MeelService.create(user=request.user, **serializer.validated_data)
        MeelAuditService.log_meel_created(request, meel)

        meel = MeelService.owned_by(request.user).get(id=meel.id)
        return Response(
            {"message": "Meel record created successfully", "meel": MeelSerializer(meel).data},
            status=status.HTTP_201_CREATED,
        )


class MeelDetailAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, meel_id: int):
        meel = MeelService.owned_by(request.user).filter(id=meel_id).first()
        if not meel:
            return Response({"detail": "Meel record not found."}, status=status.HTTP_404_NOT_FOUND)
        return Response(MeelSerializer(meel).data)

    def put(self, request, meel_id: int):
        meel = MeelService.owned_by(request.user).filter(id=meel_id).first()
        if not meel:
            return Response({"detail": "Meel record not found."}, status=status.HTTP_404_NOT_FOUND)

        serializer = MeelSerializer(meel, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        changed_fields = MeelService.update(meel=meel, **serializer.validated_data)
        if changed_fields:
            MeelAuditService.log_meel_updated(request, meel, changed_fields=changed_fields)

        meel = MeelService.owned_by(request.user).get(id=meel_id)
        return Response({"message": "Meel record updated successfully", "meel": MeelSerializer(meel).data})

    def patch(self, request, meel_id: int):
        return self.put(request, meel_id)

    def delete(self, request, meel_id: int):
        meel = MeelService.owned_by(request.user).filter(id=meel_id).first()
        if not meel:
            return Response({"detail": "Meel record not found."}, status=status.HTTP_404_NOT_FOUND)

        meel.delete()
        MeelAuditService.log_meel_deleted(request, meel_id=meel_id)
        return Response({"message": "Meel record deleted successfully"}, status=status.HTTP_200_OK)


class MeelStatsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = MeelStatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        start_date = query.validated_data.get("start_date")
        end_date = query.validated_data.get("end_date")

        qs = MeelService.owned_by(request.user)
        if start_date and end_date:
            qs = qs.filter(created_at__date__range=(start_date, end_date))
        return Response(MeelService.stats(qs))
