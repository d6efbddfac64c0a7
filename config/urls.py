from django.contrib import admin
from django.urls import include, path, re_path
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView

from .health import api_route_not_found, health_check

admin.site.site_header = "PayTrack Administration"
admin.site.site_title = "PayTrack Admin"
admin.site.index_title = "Farm bookkeeping"

urlpatterns = [
    path("health/", health_check, name="health"),
    path("api/health/", health_check, name="api-health"),
    path("admin/", admin.site.urls),

    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),

    path("api/auth/", include("accounts.urls")),
    path("api/telegram/", include("apps.telegram.urls")),
    path("api/workers/", include("apps.workers.urls")),
    path("api/worker-payments/", include("apps.payments.urls_worker")),
    path("api/payments/", include("apps.payments.urls")),
    path("api/attendance/", include("apps.attendance.urls")),
    path("api/persons/", include("apps.agriculture.urls_persons")),
    path("api/cultivations/", include("apps.agriculture.urls")),
    path("api/properties/", include("apps.properties.urls")),
    path("api/meel/", include("apps.meel.urls")),
    path("api/analytics/", include("apps.analytics.urls")),

    re_path(r"^api/.*$", api_route_not_found, name="api-not-found"),
]
