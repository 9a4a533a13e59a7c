from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path('site-admin/', admin.site.urls),
    path('', include('accounts.urls')),
    path('', include('documents.urls')),
    path('', include('mis.urls')),
    path('routing/', include('routing.urls')),
    path('', include('core.urls')),
]
