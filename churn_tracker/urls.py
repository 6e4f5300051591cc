from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),

    # JSON API + exports
    path("api/", include("customers.urls")),
    path("api/", include("cancellations.urls")),
]
