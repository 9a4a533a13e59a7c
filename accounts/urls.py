from django.contrib.auth import views as auth_views
from django.urls import path
from . import views

urlpatterns = [
    path('login/', views.PortalLoginView.as_view(), name='login'),
    path('logout/', auth_views.LogoutView.as_view(), name='logout'),

    # Account management, Admin portal only
    path('admin/accounts/', views.AccountListView.as_view(), name='account_list'),
    path('admin/accounts/add/', views.AccountCreateView.as_view(), name='account_create'),
    path('admin/accounts/<int:pk>/edit/', views.AccountUpdateView.as_view(), name='account_update'),
    path('admin/accounts/<int:pk>/delete/', views.AccountDeleteView.as_view(), name='account_delete'),
]
