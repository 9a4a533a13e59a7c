from django.urls import path
from . import views

app_name = 'routing'

urlpatterns = [
    path('documents/<str:reference_number>/<slug:action>/', views.DocumentActionView.as_view(), name='document_action'),
    path('closed/return/', views.BulkReturnView.as_view(), name='bulk_return'),
    path('purge/', views.PurgeDocumentsView.as_view(), name='purge'),
]
