from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import DashboardQuerySerializer, DateRangeQuerySerializer
from .services import AnalyticsService, DateRange, crop_rollup, dashboard, partner_rollup, worker_rollup


def _period(query_params, serializer_class=DateRangeQuerySerializer):
    query = serializer_class(data=query_params)
    query.is_valid(raise_exception=True)
    data = query.validated_data
    return DateRange(start=data.get("start_date"), end=data.get("end_date")), data


class DashboardAnalyticsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        period, data = _period(request.query_params, DashboardQuerySerializer)
        return Response(
            dashboard(
                payments=AnalyticsService.payments(period),
                cultivations=AnalyticsService.cultivations(period),
                properties=AnalyticsService.properties(period),
                attendance=AnalyticsService.attendance(period),
                period=period,
                category=data["category"],
            )
        )


class WorkerAnalyticsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        period, _ = _period(request.query_params)
        return Response(
            worker_rollup(
                workers=AnalyticsService.workers(),
                payments=AnalyticsService.payments(period),
                attendance=AnalyticsService.attendance(period),
            )
        )


class AgricultureAnalyticsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        period, _ = _period(request.query_params)
        return Response(crop_rollup(AnalyticsService.cultivations(period)))


class RealEstateAnalyticsAPIView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        period, _ = _period(request.query_params)
        return Response(partner_rollup(AnalyticsService.properties(period)))
