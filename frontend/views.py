# frontend/views.py
import logging

from django.contrib import messages
from django.shortcuts import render, redirect
from django.urls import reverse
from django.utils import timezone
from django.utils.http import url_has_allowed_host_and_scheme, urlencode
from django.views.decorators.http import require_POST

from .api import auth as auth_api
from .api import members as members_api
from .api import reservations as reservations_api
from .availability import AvailabilityService, service_for
from .booking import PendingBooking, clear_pending, load_pending, resolve_conflict as resolve_booking_conflict, save_pending, submit_booking
from .decorators import anonymous_required, member_required
from .exceptions import APIResponseError, BackendError, BookingLimitError, SessionExpiredError
from .forms import BookingForm, LoginForm, NotificationForm, PasswordChangeForm, ProfileForm, ProfilePictureForm
from .grid import build_grid, date_window, find_slot, neighbour_days, parse_day, parse_slot_time
from .help import FAQ_ITEMS, filter_faq
from .session import clear_token, get_token, set_token

logger = logging.getLogger(__name__)


def local_now():
    """Current club-local time, naive."""
    return timezone.localtime().replace(tzinfo=None)


def dashboard_url(day=None, **params):
    query = {"date": day.isoformat()} if day else {}
    query.update({k: v for k, v in params.items() if v is not None})
    url = reverse("dashboard")
    return f"{url}?{urlencode(query)}" if query else url


def safe_next(request, fallback):
    target = request.POST.get("next") or request.GET.get("next")
    if target and url_has_allowed_host_and_scheme(target, allowed_hosts={request.get_host()}):
        return target
    return fallback


def root(request):
    if request.member:
        return redirect("dashboard")
    return redirect("overview")


# -------------------------
# Authentication
# -------------------------
@anonymous_required
def login_page(request):
    error = None
    if request.method == "POST":
        form = LoginForm(request.POST)
        if form.is_valid():
            try:
                token, member = auth_api.login(
                    request.api,
                    form.cleaned_data["email"],
                    form.cleaned_data["password"],
                )
            except BackendError as e:
                logger.info("Login failed for %s: %s", form.cleaned_data["email"], e)
                error = e.payload.get("error") or "Anmeldung fehlgeschlagen"
            else:
                set_token(request, token)
                logger.info("Member %s logged in", member.id)
                return redirect("dashboard")
    else:
        form = LoginForm()
    return render(request, "frontend/login.html", {"form": form, "error": error})


@require_POST
def logout_view(request):
    if get_token(request):
        try:
            auth_api.logout(request.api)
        except APIResponseError as e:
            # the session is dropped either way
            logger.info("Backend logout failed: %s", e)
    clear_token(request)
    return redirect("login")


# -------------------------
# Court overview + Dashboard
# -------------------------
def overview(request):
    """Public, read-only court grid."""
    now = local_now()
    today = now.date()
    day = parse_day(request.GET.get("date"), today)

    if request.member:
        service = service_for(request)
    else:
        service = AvailabilityService(request.api)
    availability, _ = service.get_for_date(day.isoformat())
    service.prefetch_around(day.isoformat())

    prev_day, next_day = neighbour_days(day, today)
    return render(request, "frontend/overview.html", {
        "day": day,
        "today": today,
        "prev_day": prev_day,
        "next_day": next_day,
        "days": date_window(day, today),
        "rows": build_grid(availability, None, day, now),
    })


@member_required
def dashboard(request):
    member = request.member
    now = local_now()
    today = now.date()
    day = parse_day(request.GET.get("date"), today)

    service = service_for(request)
    if not service.cache.has(today.isoformat()):
        service.initial_load(today)
    availability, _ = service.get_for_date(day.isoformat())
    service.prefetch_around(day.isoformat())
    rows = build_grid(availability, member.id, day, now)

    status = reservations_api.get_reservation_status(request.api)
    _, reservations = reservations_api.get_reservations(request.api)
    own = [r for r in reservations if r.booked_for_id == member.id]
    for_others = [r for r in reservations if r.booked_by_id == member.id and r.booked_for_id != member.id]

    prev_day, next_day = neighbour_days(day, today)
    context = {
        "day": day,
        "today": today,
        "prev_day": prev_day,
        "next_day": next_day,
        "days": date_window(day, today),
        "rows": rows,
        "status": status,
        "own_reservations": own,
        "bookings_for_others": for_others,
        "show_payment_banner": member.fee_paid is False,
        "close_url": dashboard_url(day),
    }

    court = request.GET.get("court", "")
    slot_time = parse_slot_time(request.GET.get("time"))
    if court.isdigit() and slot_time:
        slot = find_slot(rows, int(court), slot_time)
        if slot and slot.is_bookable:
            context["booking"] = booking_dialog(request, day, slot)

    cancel_id = request.GET.get("cancel", "")
    if cancel_id.isdigit():
        context["cancel_reservation"] = next(
            (r for r in own + for_others if r.id == int(cancel_id) and r.can_cancel),
            None,
        )

    return render(request, "frontend/dashboard.html", context)


def booking_dialog(request, day, slot):
    """State of the "Platz buchen" dialog, taken from the query string."""
    book_for_other = request.GET.get("for") == "other"
    query = request.GET.get("q", "").strip()
    candidates = []
    if book_for_other:
        if len(query) >= 2:
            candidates = members_api.search_members(request.api, query)
        else:
            candidates = members_api.get_favourites(request.api)
        candidates = [m for m in candidates if m.id != request.member.id]
    return {
        "slot": slot,
        "day": day,
        "book_for_other": book_for_other,
        "query": query,
        "candidates": candidates,
        "showing_favourites": book_for_other and len(query) < 2,
        "selected_member": request.GET.get("member", ""),
        "close_url": dashboard_url(day),
    }


# -------------------------
# Booking
# -------------------------
@member_required
@require_POST
def create_booking(request):
    form = BookingForm(request.POST)
    if not form.is_valid():
        messages.error(request, "Ungültige Buchungsdaten.")
        return redirect("dashboard")

    data = form.cleaned_data
    day = data["date"]
    try:
        submit_booking(request.api, data["court_id"], day, data["start_time"], data["booked_for_id"])
    except BookingLimitError as e:
        logger.info("Booking limit reached for member %s", request.member.id)
        save_pending(request, PendingBooking(
            court_id=data["court_id"],
            date=day,
            start_time=data["start_time"],
            booked_for_id=data["booked_for_id"],
            sessions=e.sessions,
        ))
        return redirect("booking-conflict")
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        messages.error(request, e.message)
        return redirect(dashboard_url(day, court=data["court_id"], time=data["start_time"]))

    service_for(request).invalidate(day.isoformat())
    messages.success(request, "Buchung erfolgreich erstellt")
    return redirect(dashboard_url(day))


@member_required
def booking_conflict(request):
    pending = load_pending(request)
    if pending is None:
        return redirect("dashboard")

    selected = None
    selected_id = request.GET.get("selected", "")
    if selected_id.isdigit():
        session = pending.session_for(int(selected_id))
        if session and not session.is_short_notice:
            selected = session

    return render(request, "frontend/booking_conflict.html", {
        "pending": pending,
        "selected": selected,
        "close_url": dashboard_url(pending.date),
    })


@member_required
@require_POST
def resolve_conflict(request):
    """Cancel the chosen reservation and retry the pending booking."""
    pending = load_pending(request)
    if pending is None:
        return redirect("dashboard")

    try:
        reservation_id = int(request.POST.get("reservation_id", ""))
    except ValueError:
        return redirect("booking-conflict")

    service = service_for(request)
    try:
        resolve_booking_conflict(request.api, pending, reservation_id)
    except ValueError:
        messages.error(request, "Diese Buchung kann nicht storniert werden.")
        return redirect("booking-conflict")
    except BookingLimitError as e:
        pending.sessions = e.sessions
        save_pending(request, pending)
        return redirect("booking-conflict")
    except SessionExpiredError:
        raise
    except BackendError as e:
        if pending.session_for(reservation_id) is None:
            # cancelled, but the retry failed
            logger.warning("Rebooking after cancelling %s failed: %s", reservation_id, e)
            clear_pending(request)
            messages.error(request, "Deine bisherige Buchung wurde storniert, die neue Buchung konnte aber nicht erstellt werden: "
                           + (e.payload.get("error") or "Fehler beim Buchen"))
            return redirect(dashboard_url(pending.date))
        if not isinstance(e, APIResponseError):
            raise
        messages.error(request, e.message)
        return redirect("booking-conflict")
    finally:
        service.invalidate(pending.date.isoformat())

    clear_pending(request)
    messages.success(request, "Buchung erfolgreich erstellt")
    return redirect(dashboard_url(pending.date))


@member_required
@require_POST
def cancel_pending_booking(request):
    pending = load_pending(request)
    clear_pending(request)
    if pending is None:
        return redirect("dashboard")
    return redirect(dashboard_url(pending.date))


# -------------------------
# Reservations
# -------------------------
@member_required
def reservations(request):
    now, items = reservations_api.get_reservations(request.api, include_past=True)
    now = now or local_now()
    items = [r for r in items if r.status != "cancelled"]

    upcoming = sorted((r for r in items if r.ends_at > now), key=lambda r: r.starts_at)
    past = sorted((r for r in items if r.ends_at <= now), key=lambda r: r.starts_at, reverse=True)
    tab = "past" if request.GET.get("tab") == "past" else "upcoming"

    cancel = None
    cancel_id = request.GET.get("cancel", "")
    if cancel_id.isdigit():
        cancel = next((r for r in upcoming if r.id == int(cancel_id) and r.can_cancel), None)

    return render(request, "frontend/reservations.html", {
        "tab": tab,
        "upcoming": upcoming,
        "past": past,
        "shown": past if tab == "past" else upcoming,
        "cancel_reservation": cancel,
    })


@member_required
@require_POST
def cancel_reservation(request, reservation_id):
    target = safe_next(request, reverse("reservations"))
    try:
        reservations_api.cancel_reservation(request.api, reservation_id)
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        logger.info("Cancelling reservation %s failed: %s", reservation_id, e)
        messages.error(request, "Fehler beim Stornieren der Buchung")
        return redirect(target)

    day = request.POST.get("date")
    if day:
        service_for(request).invalidate(day)
    messages.success(request, "Buchung erfolgreich storniert")
    return redirect(target)


# -------------------------
# Favourites
# -------------------------
@member_required
def favourites(request):
    favs = members_api.get_favourites(request.api)
    context = {"favourites": favs}

    if request.GET.get("add"):
        query = request.GET.get("q", "").strip()
        results = []
        if len(query) >= 2:
            known = {f.id for f in favs} | {request.member.id}
            results = [m for m in members_api.search_members(request.api, query) if m.id not in known]
        context["search"] = {"query": query, "results": results}

    remove_id = request.GET.get("remove")
    if remove_id:
        context["remove_favourite"] = next((f for f in favs if f.id == remove_id), None)

    return render(request, "frontend/favourites.html", context)


@member_required
@require_POST
def add_favourite(request):
    member_id = request.POST.get("member_id", "")
    try:
        members_api.add_favourite(request.api, member_id)
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        messages.error(request, e.message)
    else:
        messages.success(request, "Favorit hinzugefügt")
    return redirect("favourites")


@member_required
@require_POST
def remove_favourite(request, member_id):
    try:
        members_api.remove_favourite(request.api, member_id)
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        messages.error(request, e.message)
    else:
        messages.success(request, "Favorit entfernt")
    return redirect("favourites")


# -------------------------
# Profile
# -------------------------
@member_required
def profile(request):
    member = request.member
    profile_form = ProfileForm.for_member(member)
    notification_form = NotificationForm.for_member(member)
    password_form = PasswordChangeForm()

    if request.method == "POST":
        action = request.POST.get("action")
        if action == "profile":
            profile_form = ProfileForm(request.POST)
            if profile_form.is_valid():
                return _update_profile(request, profile_form.cleaned_data)
        elif action == "notifications":
            notification_form = NotificationForm(request.POST)
            if notification_form.is_valid():
                return _update_profile(request, notification_form.cleaned_data)
        elif action == "password":
            password_form = PasswordChangeForm(request.POST)
            if password_form.is_valid():
                try:
                    members_api.change_password(
                        request.api,
                        password_form.cleaned_data["current_password"],
                        password_form.cleaned_data["new_password"],
                    )
                except SessionExpiredError:
                    raise
                except APIResponseError as e:
                    password_form.add_error("current_password", e.message)
                else:
                    messages.success(request, "Passwort erfolgreich geändert")
                    return redirect("profile")

    return render(request, "frontend/profile.html", {
        "profile_form": profile_form,
        "notification_form": notification_form,
        "password_form": password_form,
        "picture_form": ProfilePictureForm(),
    })


def _update_profile(request, data):
    try:
        members_api.update_profile(request.api, data)
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        messages.error(request, e.message or "Fehler beim Speichern")
    else:
        messages.success(request, "Profil erfolgreich aktualisiert!")
    return redirect("profile")


@member_required
@require_POST
def upload_profile_picture(request):
    form = ProfilePictureForm(request.POST, request.FILES)
    if not form.is_valid():
        for error in form.errors.get("picture", []):
            messages.error(request, error)
        return redirect("profile")
    try:
        members_api.upload_profile_picture(request.api, form.cleaned_data["picture"])
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        logger.info("Profile picture upload failed: %s", e)
        messages.error(request, "Fehler beim Hochladen des Profilbilds")
    else:
        messages.success(request, "Profilbild erfolgreich hochgeladen!")
    return redirect("profile")


@member_required
@require_POST
def delete_profile_picture(request):
    try:
        members_api.delete_profile_picture(request.api)
    except SessionExpiredError:
        raise
    except APIResponseError as e:
        logger.info("Profile picture removal failed: %s", e)
        messages.error(request, "Fehler beim Entfernen des Profilbilds")
    else:
        messages.success(request, "Bild gelöscht")
    return redirect("profile")


@member_required
@require_POST
def resend_verification(request):
    try:
        members_api.resend_verification_email(request.api)
    except SessionExpiredError:
        raise
    except APIResponseError:
        messages.error(request, "Fehler beim Senden der E-Mail")
    else:
        messages.success(request, "Bestätigungs-E-Mail wurde gesendet! Bitte prüfe dein Postfach.")
    return redirect(safe_next(request, reverse("profile")))


@member_required
@require_POST
def confirm_payment(request):
    try:
        members_api.confirm_payment(request.api)
    except SessionExpiredError:
        raise
    except APIResponseError:
        messages.error(request, "Fehler bei der Zahlungsbestätigung")
    else:
        messages.success(request, "Zahlungsbestätigung wurde angefordert")
    return redirect(safe_next(request, reverse("dashboard")))


# -------------------------
# Statistics + Help
# -------------------------
@member_required
def statistics(request):
    year = request.GET.get("year", "")
    stats = members_api.get_member_statistics(
        request.api,
        request.member.id,
        int(year) if year.isdigit() else None,
    )
    monthly = stats.get("monthly_breakdown") or []
    max_count = max((m.get("count", 0) for m in monthly), default=0) or 1
    for month in monthly:
        month["width"] = min(round(month.get("count", 0) * 100 / max_count), 100)
    return render(request, "frontend/statistics.html", {
        "stats": stats,
        "year": year,
        "monthly": monthly,
    })


def help_center(request):
    query = request.GET.get("q", "").strip()
    return render(request, "frontend/help.html", {
        "query": query,
        "categories": filter_faq(FAQ_ITEMS, query),
    })


# -------------------------
# Error pages
# -------------------------
def forbidden(request):
    return render(request, "frontend/errors/403.html", status=403)


def server_error_page(request):
    return render(request, "frontend/errors/500.html", status=500)


def handler404(request, exception):
    return render(request, "frontend/errors/404.html", status=404)


def handler403(request, exception):
    return render(request, "frontend/errors/403.html", status=403)


def handler500(request):
    return render(request, "frontend/errors/500.html", status=500)
