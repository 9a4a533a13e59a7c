from django.urls import path
from . import views

app_name = 'documents'

urlpatterns = [
    # Admin portal
    path('admin/assign/', views.DocumentIntakeView.as_view(), name='intake'),
    path('admin/pending/', views.AdminPendingView.as_view(), name='admin_pending'),
    path('admin/ongoing/', views.AdminOngoingView.as_view(), name='admin_ongoing'),
    path('admin/sent/', views.AdminSentView.as_view(), name='admin_sent'),
    path('admin/hold/', views.AdminHoldView.as_view(), name='admin_hold'),
    path('admin/closed/', views.AdminClosedView.as_view(), name='admin_closed'),
    path('admin/returned/', views.AdminReturnedView.as_view(), name='admin_returned'),
    path('admin/edit/<str:reference_number>/', views.DocumentEditView.as_view(), name='edit'),

    # Secretary portal
    path('secretary/pending/', views.SecretaryPendingView.as_view(), name='secretary_pending'),
    path('secretary/division/', views.SecretaryDivisionView.as_view(), name='secretary_division'),
    path('secretary/ongoing/', views.SecretaryOngoingView.as_view(), name='secretary_ongoing'),
    path('secretary/hold/', views.SecretaryHoldView.as_view(), name='secretary_hold'),
    path('secretary/sent/', views.SecretarySentView.as_view(), name='secretary_sent'),

    # Subject information, readable from either portal
    path('documents/<str:reference_number>/', views.DocumentDetailView.as_view(), name='detail'),
]
