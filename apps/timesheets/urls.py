from django.urls import path
from .views import (
    ClockInView, ClockOutView, OpenShiftView, MyShiftsView, VenueShiftsView, ShiftStatusView,
    ClockInTargetsView, QrGenerateView, QrValidateView,
)

urlpatterns = [
    # Clocking
    path('clock-in/', ClockInView.as_view(), name='clock_in'),
    path('clock-out/', ClockOutView.as_view(), name='clock_out'),
    path('targets/', ClockInTargetsView.as_view(), name='clock_in_targets'),

    # Shifts
    path('shifts/open/', OpenShiftView.as_view(), name='open_shift'),
    path('shifts/my/', MyShiftsView.as_view(), name='my_shifts'),
    path('shifts/venue/<int:venue_id>/', VenueShiftsView.as_view(), name='venue_shifts'),
    path('shifts/<int:shift_id>/status/', ShiftStatusView.as_view(), name='shift_status'),

    # QR codes
    path('qr/generate/', QrGenerateView.as_view(), name='qr_generate'),
    path('qr/validate/', QrValidateView.as_view(), name='qr_validate'),
]
