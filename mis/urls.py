from django.urls import path
from . import views

app_name = 'mis'

urlpatterns = [
    path('admin/dashboard/', views.AdminDashboardView.as_view(), name='admin_dashboard'),
    path('admin/mandays/', views.MandayAnalyticsView.as_view(), name='mandays'),
    path('admin/reports/documents/', views.DocumentReportView.as_view(), name='document_report'),
    path('secretary/dashboard/', views.SecretaryDashboardView.as_view(), name='secretary_dashboard'),
]
