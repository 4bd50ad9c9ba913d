# tcz/urls.py
from django.urls import path
from frontend import admin_views, views

urlpatterns = [
    # Landing / court overview
    path('', views.root, name='home'),
    path('overview', views.overview, name='overview'),

    # Auth
    path('login', views.login_page, name='login'),
    path('logout', views.logout_view, name='logout'),

    # Dashboard + booking flow
    path('dashboard', views.dashboard, name='dashboard'),
    path('bookings', views.create_booking, name='create-booking'),
    path('bookings/conflict', views.booking_conflict, name='booking-conflict'),
    path('bookings/conflict/resolve', views.resolve_conflict, name='resolve-conflict'),
    path('bookings/conflict/cancel', views.cancel_pending_booking, name='cancel-pending-booking'),

    # Reservations
    path('reservations', views.reservations, name='reservations'),
    path('reservations/<int:reservation_id>/cancel', views.cancel_reservation, name='cancel-reservation'),

    # Favourites
    path('favourites', views.favourites, name='favourites'),
    path('favourites/add', views.add_favourite, name='add-favourite'),
    path('favourites/<str:member_id>/remove', views.remove_favourite, name='remove-favourite'),

    # Profile
    path('profile', views.profile, name='profile'),
    path('profile/picture', views.upload_profile_picture, name='upload-profile-picture'),
    path('profile/picture/delete', views.delete_profile_picture, name='delete-profile-picture'),
    path('profile/verification', views.resend_verification, name='resend-verification'),
    path('profile/confirm-payment', views.confirm_payment, name='confirm-payment'),

    path('statistics', views.statistics, name='statistics'),
    path('help', views.help_center, name='help'),

    # Admin area (administrators and teamsters)
    path('admin', admin_views.admin_home, name='admin-home'),
    path('admin/payments/<str:member_id>/confirm', admin_views.confirm_member_payment, name='admin-confirm-payment'),
    path('admin/payments/<str:member_id>/reject', admin_views.reject_member_payment, name='admin-reject-payment'),
    path('admin/settings', admin_views.admin_settings, name='admin-settings'),
    path('admin/blocks', admin_views.blocks, name='admin-blocks'),
    path('admin/blocks/<str:batch_id>/delete', admin_views.delete_block, name='admin-delete-block'),
    path('admin/calendar', admin_views.block_calendar, name='admin-calendar'),
    path('admin/reasons', admin_views.block_reasons, name='admin-reasons'),
    path('admin/reasons/<int:reason_id>/teamster', admin_views.toggle_reason_teamster, name='admin-reason-teamster'),
    path('admin/reasons/<int:reason_id>/delete', admin_views.delete_reason, name='admin-delete-reason'),
    path('admin/members', admin_views.members, name='admin-members'),
    path('admin/members/<str:member_id>', admin_views.member_detail, name='admin-member'),
    path('admin/members/<str:member_id>/active', admin_views.member_active, name='admin-member-active'),
    path('admin/audit', admin_views.audit_log, name='admin-audit'),
    path('admin/features', admin_views.feature_flags, name='admin-features'),
    path('admin/features/<int:flag_id>', admin_views.toggle_feature_flag, name='admin-toggle-feature'),

    # Error pages
    path('forbidden', views.forbidden, name='forbidden'),
    path('error', views.server_error_page, name='server-error'),
]

handler404 = 'frontend.views.handler404'
handler403 = 'frontend.views.handler403'
handler500 = 'frontend.views.handler500'
