"""
URL mappings for the discharge API.

Paths carry no trailing slash; the front-end client calls them as-is.
"""
from django.urls import path

from .views.beds import list_beds
from .views.health import healthz
from .views.pipeline import (
    calculate_billing,
    discharge_audit,
    discharge_detail,
    initiate_discharge,
    process_payment,
    release_bed,
)

urlpatterns = [
    path('healthz', healthz, name='healthz'),
    # Discharge pipeline stages, in order
    path('api/discharge/initiate', initiate_discharge, name='discharge_initiate'),
    path('api/discharge/billing', calculate_billing, name='discharge_billing'),
    path('api/discharge/payment', process_payment, name='discharge_payment'),
    path('api/discharge/bed-release', release_bed, name='discharge_bed_release'),
    # Discharge case views
    path('api/discharge/<int:pk>', discharge_detail, name='discharge_detail'),
    path('api/discharge/<int:pk>/audit', discharge_audit, name='discharge_audit'),
    # Beds
    path('api/beds', list_beds, name='bed_list'),
]
