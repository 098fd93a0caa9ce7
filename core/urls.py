"""
URL configuration for the Contact Form Service.

Public contact endpoints live under /api/contact/; the Django admin exposes
stored submissions read-only.
"""
from django.contrib import admin
from django.urls import path, include
from django.views.generic import RedirectView

urlpatterns = [
    path('', RedirectView.as_view(url='/admin/', permanent=False)),
    path('admin/', admin.site.urls),
    path('api/contact/', include('contact.urls')),
]
