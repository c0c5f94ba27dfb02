from django.urls import path
from rest_framework.authtoken.views import obtain_auth_token
from .views import UserProfileView, VenueStaffListView, VenueStaffDetailView

urlpatterns = [
    # Authentication
    path('auth/token/', obtain_auth_token, name='auth_token'),

    # Profile
    path('me/', UserProfileView.as_view(), name='user_profile'),

    # Venue staff management
    path('venues/<int:venue_id>/staff/', VenueStaffListView.as_view(), name='venue_staff'),
    path('venues/<int:venue_id>/staff/<int:staff_id>/', VenueStaffDetailView.as_view(), name='venue_staff_detail'),
]
